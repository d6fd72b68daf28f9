from __future__ import annotations

from pathlib import Path
import tomllib


def _pyproject() -> dict:
    pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    return tomllib.loads(pyproject_path.read_text(encoding="utf-8"))


def test_console_script_points_at_cli_main() -> None:
    scripts = _pyproject().get("project", {}).get("scripts", {})
    assert scripts.get("dhcpstack") == "dhcpstack.cli:main"


def test_defaults_config_is_packaged() -> None:
    package_data = _pyproject().get("tool", {}).get("setuptools", {}).get("package-data", {})
    assert "config/*.yml" in package_data.get("dhcpstack", [])


def test_every_package_directory_is_importable() -> None:
    package_root = Path(__file__).resolve().parents[2] / "dhcpstack"
    for directory in [package_root, *[path for path in package_root.rglob("*") if path.is_dir()]]:
        if directory.name == "__pycache__":
            continue
        assert (directory / "__init__.py").is_file(), directory
