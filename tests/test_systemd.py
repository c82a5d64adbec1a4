"""Tests for systemd unit generation."""
from pathlib import Path

from privastead_setup.systemd import ServiceUnit, install_instructions


def make_unit(**overrides):
    values = dict(
        user="privastead",
        working_directory=Path("/srv/setup/privastead/server"),
        cargo_path="/home/privastead/.cargo/bin/cargo",
    )
    values.update(overrides)
    return ServiceUnit(**values)


def test_render_fills_every_placeholder():
    content = make_unit().render()

    assert "PLACEHOLDER" not in content
    assert "Description=Privastead Server\n" in content
    assert "User=privastead\n" in content
    assert "WorkingDirectory=/srv/setup/privastead/server\n" in content
    assert "ExecStart=/home/privastead/.cargo/bin/cargo run --release\n" in content


def test_render_restart_policy():
    content = make_unit(restart_sec=3).render()

    assert "Restart=always\n" in content
    assert "RestartSec=3\n" in content
    assert "StandardOutput=journal\n" in content
    assert "StandardError=journal\n" in content
    assert "WantedBy=multi-user.target\n" in content


def test_write(tmp_path):
    path = make_unit().write(tmp_path / "privastead.service")

    assert path.read_text() == make_unit().render()


def test_install_instructions():
    text = install_instructions("privastead.service")

    assert "sudo cp privastead.service /etc/systemd/system/" in text
    assert "sudo systemctl daemon-reload" in text
    assert "sudo systemctl enable privastead.service" in text
    assert "sudo systemctl start privastead.service" in text
    assert "sudo systemctl status privastead.service" in text
