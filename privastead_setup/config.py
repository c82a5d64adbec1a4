"""Settings for a setup run."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

DEFAULT_REPO_URL = "https://github.com/privastead/privastead.git"
DEFAULT_WORKSPACE = "privastead"

# Tools checked before anything else, in order, with the hint shown when missing
REQUIRED_TOOLS: Tuple[Tuple[str, str], ...] = (
    ("git", "Please install git first."),
    ("cargo", "Please install Rust first.\nVisit: https://rustup.rs/"),
)

CREDENTIAL_FILES = ("user_credentials", "user_credentials_qrcode.png")
SERVICE_ACCOUNT_KEY = "service_account_key.json"
SERVICE_FILE = "privastead.service"

_TRUTHY = {"1", "true", "yes", "on"}


def check_workspace_name(name: str) -> None:
    """Reject anything but a single plain directory name."""
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if not name or name in (".", "..") or any(sep in name for sep in separators):
        raise ValueError(f"PRIVASTEAD_WORKSPACE must be a plain directory name, got {name!r}")


@dataclass
class Settings:
    """Where things live and what to fetch."""
    root: Path = field(default_factory=Path.cwd)
    repo_url: str = DEFAULT_REPO_URL
    workspace_name: str = DEFAULT_WORKSPACE
    restart_sec: int = 1
    verbose: bool = False

    def __post_init__(self) -> None:
        # The workspace is deleted on every run, so it must stay a direct child of root
        check_workspace_name(self.workspace_name)

    @property
    def workspace(self) -> Path:
        return self.root / self.workspace_name

    @property
    def config_tool_dir(self) -> Path:
        return self.workspace / "config_tool"

    @property
    def server_dir(self) -> Path:
        return self.workspace / "server"

    @property
    def credential_paths(self) -> Tuple[Path, ...]:
        return tuple(self.config_tool_dir / name for name in CREDENTIAL_FILES)

    @property
    def service_account_key(self) -> Path:
        """Where the operator drops the Firebase key."""
        return self.root / SERVICE_ACCOUNT_KEY

    @property
    def service_file(self) -> Path:
        return self.root / SERVICE_FILE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, root: Optional[Path] = None) -> "Settings":
        """Build settings from defaults and PRIVASTEAD_* environment variables."""
        env = os.environ if environ is None else environ

        restart = env.get("PRIVASTEAD_RESTART_SEC", "1")
        try:
            restart_sec = int(restart)
        except ValueError:
            raise ValueError(f"PRIVASTEAD_RESTART_SEC must be an integer, got {restart!r}")
        if restart_sec < 0:
            raise ValueError(f"PRIVASTEAD_RESTART_SEC must not be negative, got {restart_sec}")

        return cls(
            root=root or Path.cwd(),
            repo_url=env.get("PRIVASTEAD_REPO_URL", DEFAULT_REPO_URL),
            workspace_name=env.get("PRIVASTEAD_WORKSPACE", DEFAULT_WORKSPACE),
            restart_sec=restart_sec,
            verbose=env.get("PRIVASTEAD_SETUP_VERBOSE", "").strip().lower() in _TRUTHY,
        )
