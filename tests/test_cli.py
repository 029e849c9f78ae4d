"""Tests for the CLI module."""

import json
import re
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from hinged import __version__
from hinged.cli import main
from hinged.enums import CollectionStatus
from hinged.errors import ConfigError
from hinged.store import Library

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


@pytest.fixture
def library_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Library path inside a temporary working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path / "lib.json"


def _run(library_file: Path, *args: str, input: str | None = None) -> Result:
    runner = CliRunner()
    return runner.invoke(main, ["--library", str(library_file), *args], input=input)


def _json(result: Result) -> object:
    return json.loads(_ANSI_RE.sub("", result.output))


def _setup_album(library_file: Path) -> None:
    assert _run(library_file, "collection", "add", "Canada Scott", "--country", "Canada").exit_code == 0
    assert _run(library_file, "album", "add", "Volume 1", "--collection", "Canada Scott").exit_code == 0


def test_main_help() -> None:
    """Test that --help works."""
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Hinged" in result.output


def test_version() -> None:
    """Test that --version works."""
    runner = CliRunner()
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert re.search(r"\d+\.\d+\.\d+", result.output)
    assert __version__ in result.output


def test_gaps_command_exists() -> None:
    """Test that the gaps command exists."""
    runner = CliRunner()
    result = runner.invoke(main, ["gaps", "--help"])
    assert result.exit_code == 0
    assert "numbering gaps" in result.output.lower()


def test_config_path() -> None:
    """Test the config path command."""
    runner = CliRunner()
    result = runner.invoke(main, ["config", "path"])
    assert result.exit_code == 0
    assert ".hinged" in result.output


def test_config_init(library_file: Path) -> None:
    """Test config init writes a file and refuses to overwrite it."""
    runner = CliRunner()
    target = library_file.parent / "custom.ini"

    result = runner.invoke(main, ["config", "init", str(target)])
    assert result.exit_code == 0
    assert target.exists()

    result = runner.invoke(main, ["config", "init", str(target)])
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_new_library_is_seeded(library_file: Path) -> None:
    """Test a new library file starts with the built-in countries."""
    result = _run(library_file, "country", "add", "Atlantis", "--prefix", "scott=ATL")
    assert result.exit_code == 0

    library = Library.open(library_file)
    assert library.find_country("Canada") is not None
    atlantis = library.find_country("Atlantis")
    assert atlantis is not None
    assert atlantis.catalog_prefixes == {"scott": "ATL"}


def test_country_add_duplicate(library_file: Path) -> None:
    """Test adding an existing country fails."""
    result = _run(library_file, "country", "add", "canada")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_country_add_bad_prefix(library_file: Path) -> None:
    """Test an unknown catalog system is rejected."""
    result = _run(library_file, "country", "add", "Atlantis", "--prefix", "minkus=A")
    assert result.exit_code == 1
    assert "Unknown catalog system" in result.output


def test_country_set_prefix(library_file: Path) -> None:
    """Test setting and clearing a prefix."""
    assert _run(library_file, "country", "set-prefix", "Peru", "scott", "PE").exit_code == 0
    peru = Library.open(library_file).find_country("Peru")
    assert peru is not None
    assert peru.catalog_prefixes == {"scott": "PE"}

    assert _run(library_file, "country", "set-prefix", "Peru", "scott").exit_code == 0
    peru = Library.open(library_file).find_country("Peru")
    assert peru is not None
    assert peru.catalog_prefixes == {}


def test_country_rename(library_file: Path) -> None:
    """Test renaming a country and refusing a name that is taken."""
    assert _run(library_file, "country", "rename", "Peru", "Republic of Peru").exit_code == 0
    library = Library.open(library_file)
    assert library.find_country("Peru") is None
    assert library.find_country("Republic of Peru") is not None

    result = _run(library_file, "country", "rename", "Republic of Peru", "canada")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_album_update(library_file: Path) -> None:
    """Test renaming an album and moving it to another collection."""
    _setup_album(library_file)
    assert _run(library_file, "collection", "add", "Airmail", "--country", "Canada").exit_code == 0

    result = _run(library_file, "album", "update", "Volume 1", "--name", "Airmail 1", "--collection", "Airmail")
    assert result.exit_code == 0

    library = Library.open(library_file)
    album = next(iter(library.albums.values()))
    airmail = next(c for c in library.collections.values() if c.name == "Airmail")
    assert album.name == "Airmail 1"
    assert album.collection_id == airmail.id

    result = _run(library_file, "album", "update", "Airmail 1")
    assert result.exit_code == 1
    assert "Nothing to update" in result.output


def test_populate_and_list_json(library_file: Path) -> None:
    """Test populating an album and listing it as JSON."""
    _setup_album(library_file)

    result = _run(library_file, "populate", "Volume 1", "1", "12", "--prefix", "C")
    assert result.exit_code == 0
    assert "Added 12 stamps" in result.output

    result = _run(
        library_file, "stamp", "list", "--album", "Volume 1", "--from", "C2", "--to", "C10", "-f", "json"
    )
    assert result.exit_code == 0
    data = _json(result)
    assert isinstance(data, list)
    assert [s["catalog_number"] for s in data] == [f"C{n}" for n in range(2, 11)]
    assert data[0]["display_catalog_number"] == "CAN C2"
    assert data[0]["country"] == "Canada"
    assert data[0]["collection_status"] == "wanted"


def test_populate_invalid_range(library_file: Path) -> None:
    """Test a reversed range fails without creating stamps."""
    _setup_album(library_file)
    result = _run(library_file, "populate", "Volume 1", "10", "5")
    assert result.exit_code == 1
    assert "Error" in result.output
    assert Library.open(library_file).stamps == {}


def test_stamp_add_update_show(library_file: Path) -> None:
    """Test the stamp lifecycle commands."""
    _setup_album(library_file)

    result = _run(
        library_file, "stamp", "add", "300d", "--album", "volume 1", "--year", "1958-1964", "--gum", "used"
    )
    assert result.exit_code == 0

    library = Library.open(library_file)
    stamp = next(iter(library.stamps.values()))
    assert stamp.collection_status is CollectionStatus.WANTED
    assert (stamp.year_start, stamp.year_end) == (1958, 1964)

    result = _run(library_file, "stamp", "update", stamp.id, "--status", "owned", "--price", "2.50")
    assert result.exit_code == 0

    result = _run(library_file, "stamp", "show", stamp.id)
    assert result.exit_code == 0
    assert "CAN 300d" in result.output
    assert "Owned" in result.output
    assert "$2.50" in result.output


def test_stamp_update_invalid_price(library_file: Path) -> None:
    """Test a malformed price is reported as an error."""
    _setup_album(library_file)
    _run(library_file, "stamp", "add", "1", "--album", "Volume 1")
    stamp_id = next(iter(Library.open(library_file).stamps))

    result = _run(library_file, "stamp", "update", stamp_id, "--price", "cheap")
    assert result.exit_code == 1
    assert "Invalid price" in result.output


def test_stamp_unknown_album(library_file: Path) -> None:
    """Test adding to a missing album fails."""
    result = _run(library_file, "stamp", "add", "1", "--album", "Nowhere")
    assert result.exit_code == 1
    assert "No album named" in result.output


def test_stamp_list_smart(library_file: Path) -> None:
    """Test smart collections from the command line."""
    _setup_album(library_file)
    _run(library_file, "populate", "Volume 1", "1", "3")
    _run(library_file, "populate", "Volume 1", "4", "5", "--status", "owned")

    result = _run(library_file, "stamp", "list", "--smart", "allOwned", "-f", "json")
    assert result.exit_code == 0
    data = _json(result)
    assert isinstance(data, list)
    assert [s["catalog_number"] for s in data] == ["4", "5"]


def test_csv_round_trip(library_file: Path) -> None:
    """Test exporting and importing CSV through the CLI."""
    _setup_album(library_file)
    _run(library_file, "populate", "Volume 1", "1", "3")
    _run(library_file, "album", "add", "Volume 2", "--collection", "Canada Scott")
    csv_path = library_file.parent / "stamps.csv"

    result = _run(library_file, "csv", "export", str(csv_path), "--album", "Volume 1")
    assert result.exit_code == 0
    assert csv_path.read_text(encoding="utf-8").splitlines()[0].startswith("Catalog Number,Country")

    result = _run(library_file, "csv", "import", str(csv_path), "--album", "Volume 2")
    assert result.exit_code == 0
    assert "3 imported, 0 updated, 0 skipped" in result.output

    result = _run(library_file, "csv", "import", str(csv_path), "--album", "Volume 2")
    assert "0 imported, 0 updated, 3 skipped" in result.output


def test_backup_create_and_restore(library_file: Path) -> None:
    """Test a backup restores into a fresh library."""
    _setup_album(library_file)
    _run(library_file, "populate", "Volume 1", "1", "3")
    backup_path = library_file.parent / "lib.hingedbackup"

    result = _run(library_file, "backup", "create", str(backup_path))
    assert result.exit_code == 0
    assert backup_path.exists()

    other = library_file.parent / "other.json"
    result = _run(other, "backup", "restore", str(backup_path), "--mode", "replace", "--yes")
    assert result.exit_code == 0
    assert "Imported" in result.output

    original = Library.open(library_file)
    restored = Library.open(other)
    assert len(restored.stamps) == 3
    assert len(restored.collections) == 1
    assert len(restored.countries) == len(original.countries)


def test_backup_restore_replace_needs_confirmation(library_file: Path) -> None:
    """Test declining the replace prompt leaves the library alone."""
    _setup_album(library_file)
    backup_path = library_file.parent / "empty.hingedbackup"
    other = library_file.parent / "other.json"
    assert _run(other, "backup", "create", str(backup_path)).exit_code == 0

    result = _run(library_file, "backup", "restore", str(backup_path), "--mode", "replace", input="n\n")

    assert result.exit_code == 1
    assert len(Library.open(library_file).collections) == 1


def test_backup_restore_corrupt(library_file: Path) -> None:
    """Test a corrupt backup gives a friendly error."""
    bad = library_file.parent / "bad.hingedbackup"
    bad.write_text("not a backup", encoding="utf-8")

    result = _run(library_file, "backup", "restore", str(bad))
    assert result.exit_code == 1
    assert "corrupted or invalid" in result.output
    assert (library_file.parent / "hinged_errors.log").exists()


def test_gaps_json(library_file: Path) -> None:
    """Test a gap report as JSON."""
    _setup_album(library_file)
    stamps = [("1", "1851", "owned"), ("2", "1852", "owned"), ("5", "1855", "owned"), ("3", "1853", "wanted")]
    for number, year, status in stamps:
        result = _run(
            library_file, "stamp", "add", number, "--album", "Volume 1", "--year", year, "--status", status
        )
        assert result.exit_code == 0

    result = _run(library_file, "gaps", "Canada", "--preset", "classic", "-f", "json")
    assert result.exit_code == 0
    data = _json(result)
    assert isinstance(data, dict)
    assert data["country"] == "Canada"
    assert data["start_year"] == 1840
    assert data["end_year"] == 1940
    assert data["owned"] == 3
    assert data["wanted"] == 1
    assert data["completion_percentage"] == 75.0
    assert data["potential_gaps"] == [4]
    assert data["potential_gap_ranges"] == ["#4"]


def test_gaps_unknown_country(library_file: Path) -> None:
    """Test the gaps command with an unknown country."""
    result = _run(library_file, "gaps", "Atlantis")
    assert result.exit_code == 1
    assert "No country named" in result.output


def test_malformed_config(library_file: Path) -> None:
    """Test a broken config file gives a friendly error instead of a traceback."""
    bad = library_file.parent / "bad.ini"
    bad.write_text("[defaults\ncatalog_system = scott\n", encoding="utf-8")

    result = _run(library_file, "--config", str(bad), "gaps", "Canada")

    assert result.exit_code == 1
    assert "Error" in result.output
    assert not isinstance(result.exception, ConfigError)
