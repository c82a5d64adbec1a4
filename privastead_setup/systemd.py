"""systemd unit generation for the Privastead server."""
from dataclasses import dataclass
from pathlib import Path
from typing import Union

TEMPLATE_PATH = Path(__file__).parent / "configs" / "privastead.service"


@dataclass
class ServiceUnit:
    user: str
    working_directory: Path
    cargo_path: str
    restart_sec: int = 1
    description: str = "Privastead Server"

    def render(self) -> str:
        """Fill the packaged unit template with this unit's values."""
        with open(TEMPLATE_PATH, 'r') as f:
            content = f.read()

        replacements = {
            "DESCRIPTION_PLACEHOLDER": self.description,
            "USER_PLACEHOLDER": self.user,
            "WORKING_DIRECTORY_PLACEHOLDER": str(self.working_directory),
            "CARGO_PATH_PLACEHOLDER": self.cargo_path,
            "RESTART_SEC_PLACEHOLDER": str(self.restart_sec),
        }
        for placeholder, value in replacements.items():
            content = content.replace(placeholder, value)
        return content

    def write(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        with open(path, 'w') as f:
            f.write(self.render())
        return path


def install_instructions(service_file: str) -> str:
    """Commands the operator runs as root to enable the unit."""
    return "\n".join([
        "To install the service, run these commands as root:",
        f"  sudo cp {service_file} /etc/systemd/system/",
        "  sudo systemctl daemon-reload",
        f"  sudo systemctl enable {service_file}",
        f"  sudo systemctl start {service_file}",
        "",
        "To check service status:",
        f"  sudo systemctl status {service_file}",
    ])
