"""Tests for the command line interface."""

from pathlib import Path

import pytest
import yaml

from entity_checker.cli import app
from tests.registries.test_yaml_file import SCHEMA_YAML
from tests.test_loader import ALICE_YAML

PERSON_SCHEMA = SCHEMA_YAML.replace(
    "attribute_defs: []",
    """attribute_defs:
      - url: http://example.org/attrdefs/address-street
        name: Street
        datatype: string
        concept_url: http://example.org/concepts/street""",
).replace(
    "      - url: http://example.org/attrdefs/person-address",
    """      - url: http://example.org/attrdefs/person-age
        name: Age
        datatype: integer
        concept_url: http://example.org/concepts/age
      - url: http://example.org/attrdefs/person-friend
        name: Friend
        datatype: entity
        range_etype_url: http://example.org/etypes/person
        concept_url: http://example.org/concepts/friend
      - url: http://example.org/attrdefs/person-address""",
)


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A project directory with a configured schema file."""
    project = tmp_path / "project"
    config_dir = project / ".entity-checker"
    config_dir.mkdir(parents=True)
    (project / "schema.yaml").write_text(PERSON_SCHEMA)
    (config_dir / "config.yaml").write_text(yaml.safe_dump({"schema.path": str(project / "schema.yaml")}))

    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(project)
    return project


def run(*tokens: str) -> int:
    """Run the CLI and return its exit status."""
    try:
        app(list(tokens))
    except SystemExit as e:
        return e.code or 0
    return 0


def test_check_valid_entity(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test checking a valid entity file."""
    (project / "alice.yaml").write_text(ALICE_YAML)

    assert run("entity", str(project / "alice.yaml")) == 0
    assert "OK: entity http://example.org/entities/alice" in capsys.readouterr().out


def test_check_invalid_entity(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that an invalid entity exits with status 1 and prints the failure."""
    document = yaml.safe_load(ALICE_YAML)
    document["attributes"][1]["values"][0]["value"] = "thirty"
    (project / "alice.yaml").write_text(yaml.safe_dump(document))

    assert run("entity", str(project / "alice.yaml")) == 1
    out = capsys.readouterr().out
    assert "FAILED" in out
    assert "type_mismatch" in out


def test_check_synthetic_entity(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that the synthetic flag relaxes the entity URL."""
    document = yaml.safe_load(ALICE_YAML)
    del document["url"]
    (project / "new.yaml").write_text(yaml.safe_dump(document))

    assert run("entity", str(project / "new.yaml")) == 1
    assert run("entity", str(project / "new.yaml"), "--synthetic") == 0


def test_check_etypes(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test checking the schema entity types and the knowledge base."""
    assert run("etypes") == 0
    assert "Checked 2 etype(s)" in capsys.readouterr().out
    assert run("etype", "http://example.org/etypes/person") == 0
    assert run("etype", "http://example.org/etypes/unknown") == 1
    assert run("ekb") == 0


def test_check_concept(project: Path) -> None:
    """Test checking concepts of the schema."""
    assert run("concept", "http://example.org/concepts/person") == 0
    assert run("concept", "http://example.org/concepts/unknown") == 1


def test_check_idresult(project: Path) -> None:
    """Test checking reconciliation results."""
    (project / "invalid.yaml").write_text(yaml.safe_dump({"assignment_result": "invalid", "entities": []}))
    (project / "reuse.yaml").write_text(yaml.safe_dump({"assignment_result": "reuse", "url": "http://x/e/1", "entities": []}))

    assert run("idresult", str(project / "invalid.yaml")) == 0
    assert run("idresult", str(project / "reuse.yaml")) == 1
