"""Provisioning workflow steps."""
import shutil
from dataclasses import dataclass
from pathlib import Path

import typer

from privastead_setup.config import CREDENTIAL_FILES, REQUIRED_TOOLS, SERVICE_ACCOUNT_KEY, Settings
from privastead_setup.confirm import Answer, Prompt, ask_yes_no, confirm_once, default_prompt
from privastead_setup.errors import (
    AcquisitionFailure,
    BuildFailure,
    GenerationFailure,
    MissingDependency,
    UserDeclined,
    WorkspaceError,
)
from privastead_setup.pipeline import Pipeline, PipelineResult, Step
from privastead_setup.systemd import ServiceUnit, install_instructions
from privastead_setup.utils import (
    command_exists,
    get_current_user,
    log_action,
    log_error,
    log_info,
    log_success,
    log_warning,
    run_command,
    which,
    working_directory,
)

FIREBASE_INSTRUCTIONS = [
    "Go to: https://console.firebase.google.com/",
    "Create a project named 'Privastead'",
    "Add an Android app with package name: privastead.camera",
    "Download google-services.json (for the Android app)",
    "Go to Project Settings > Service accounts",
    f"Generate new private key and save as '{SERVICE_ACCOUNT_KEY}'",
]


@dataclass
class SetupContext:
    settings: Settings
    prompt: Prompt = default_prompt


def check_requirements(ctx: SetupContext) -> None:
    """Stop at the first required tool missing from PATH."""
    log_info("Checking requirements...")

    for tool, hint in REQUIRED_TOOLS:
        if not command_exists(tool):
            raise MissingDependency(tool, hint)

    log_success("All requirements satisfied")


def remove_stale_workspace(ctx: SetupContext) -> None:
    """Delete a previous checkout so the clone starts from nothing."""
    settings = ctx.settings
    workspace = settings.workspace

    if workspace.is_dir():
        log_warning(f"Directory '{settings.workspace_name}' already exists. Removing it...")
        shutil.rmtree(workspace)
    elif workspace.exists():
        log_warning(f"'{settings.workspace_name}' exists and is not a directory. Removing it...")
        workspace.unlink()


def clone_repository(ctx: SetupContext) -> None:
    """Clone a fresh copy of the repository."""
    settings = ctx.settings
    log_info("Cloning Privastead repository...")

    result = run_command("git", "clone", "--recursive", settings.repo_url, str(settings.workspace))
    if not result.ok:
        raise AcquisitionFailure(f"Failed to clone {settings.repo_url}", result.exit_code)

    log_success("Repository cloned successfully")


def _require_directory(path: Path) -> None:
    if not path.is_dir():
        raise WorkspaceError(f"Directory not found in checkout: {path}")


def require_config_tool_dir(ctx: SetupContext) -> None:
    _require_directory(ctx.settings.config_tool_dir)


def require_server_dir(ctx: SetupContext) -> None:
    _require_directory(ctx.settings.server_dir)


def generate_credentials(ctx: SetupContext) -> None:
    """Run the config tool from its own directory."""
    log_info("Generating user credentials...")

    with working_directory(ctx.settings.config_tool_dir):
        result = run_command("cargo", "run", "--", "--generate-user-credentials", "--dir", ".")

    if not result.ok:
        raise GenerationFailure("Failed to generate credentials", result.exit_code)


def verify_credentials(ctx: SetupContext) -> None:
    """Both credential files must exist; a clean exit is not enough."""
    missing = [path.name for path in ctx.settings.credential_paths if not path.is_file()]
    if missing:
        raise GenerationFailure(f"Failed to generate credentials (missing: {', '.join(missing)})")

    log_success("Credentials generated successfully")
    log_info("Files created:")
    for name in CREDENTIAL_FILES:
        typer.echo(f"  - {name}")


def setup_fcm(ctx: SetupContext) -> None:
    """Wait for the operator to supply the Firebase service account key.

    This cannot be automated: the key is downloaded from the Firebase
    console. Answering yes before the file is in place just asks again.
    """
    settings = ctx.settings
    log_info("Setting up FCM credentials...")
    log_warning(f"You need to manually set up Firebase Console and download {SERVICE_ACCOUNT_KEY}")
    typer.echo("")
    typer.echo("Follow these steps:")
    for number, instruction in enumerate(FIREBASE_INSTRUCTIONS, start=1):
        typer.echo(f"{number}. {instruction}")
    typer.echo("")

    question = f"Have you placed {SERVICE_ACCOUNT_KEY} in the current directory? (y/n)"
    while True:
        answer = ask_yes_no(question, ctx.prompt)
        if answer is Answer.NEGATIVE:
            raise UserDeclined(f"Cannot proceed without {SERVICE_ACCOUNT_KEY}")

        if settings.service_account_key.is_file():
            shutil.move(str(settings.service_account_key), str(settings.server_dir / SERVICE_ACCOUNT_KEY))
            log_success(f"{SERVICE_ACCOUNT_KEY} moved to server directory")
            return

        log_error(f"{SERVICE_ACCOUNT_KEY} not found in current directory")


def build_server(ctx: SetupContext) -> None:
    """Release build of the server; cargo's exit status is the only check."""
    log_info("Building Privastead server...")

    with working_directory(ctx.settings.server_dir):
        result = run_command("cargo", "build", "--release")

    if not result.ok:
        raise BuildFailure("Failed to build server", result.exit_code)

    log_success("Server built successfully")


def create_systemd_service(ctx: SetupContext) -> None:
    """Optionally write a unit file; never installs it."""
    settings = ctx.settings
    log_info("Would you like to create a systemd service for auto-restart? (recommended for production)")

    if not confirm_once("Create systemd service? (y/n)", ctx.prompt):
        return

    cargo_path = which("cargo")
    if cargo_path is None:
        log_warning("cargo not found on PATH, not creating the service file")
        return

    unit = ServiceUnit(
        user=get_current_user(),
        working_directory=settings.server_dir.resolve(),
        cargo_path=cargo_path,
        restart_sec=settings.restart_sec,
    )
    try:
        unit.write(settings.service_file)
    except OSError as e:
        log_warning(f"Could not write {settings.service_file.name}: {e}")
        return

    log_info(f"Systemd service file created: {settings.service_file.name}")
    typer.echo("")
    typer.echo(install_instructions(settings.service_file.name))


def show_final_instructions(ctx: SetupContext) -> None:
    """Tell the operator what to do with what was produced."""
    workspace = ctx.settings.workspace_name
    log_success("Privastead server setup completed!")
    lines = [
        "",
        "Next steps:",
        "1. To run the server manually:",
        f"   cd {workspace}/server",
        "   cargo run --release",
        "",
        "2. Files you'll need for other components:",
        f"   - {workspace}/config_tool/user_credentials (for camera hub)",
        f"   - {workspace}/config_tool/user_credentials_qrcode.png (for mobile app)",
        "",
        "3. For camera hub setup, you'll need to:",
        "   - Configure your IP cameras",
        "   - Copy user_credentials to camera_hub directory",
        "   - Configure cameras.yaml",
        "",
        "4. For mobile app setup, you'll need:",
        "   - The google-services.json file from Firebase",
        "   - Build and install the Android app",
        "",
        "Server IP: Make sure your server has a public IP address",
        "accessible by both the camera hub and mobile app.",
    ]
    for line in lines:
        typer.echo(line)


def build_pipeline() -> Pipeline[SetupContext]:
    """The setup steps in the order they must run."""
    return Pipeline([
        Step("check_requirements", check_requirements),
        Step("clone_repository", clone_repository, precondition=remove_stale_workspace),
        Step("generate_credentials", generate_credentials,
             precondition=require_config_tool_dir, postcondition=verify_credentials),
        Step("setup_fcm", setup_fcm, precondition=require_server_dir),
        Step("build_server", build_server, precondition=require_server_dir),
        Step("create_systemd_service", create_systemd_service, required=False),
        Step("show_final_instructions", show_final_instructions),
    ])


def print_banner() -> None:
    typer.echo("==============================================")
    typer.echo("       Privastead Server Setup Script")
    typer.echo("==============================================")
    typer.echo("")


def provision_server(settings: Settings, prompt: Prompt = default_prompt) -> PipelineResult:
    """Main setup workflow."""
    print_banner()
    ctx = SetupContext(settings=settings, prompt=prompt)
    log_action(f"Workspace root: {settings.root}")
    return build_pipeline().run(ctx)
