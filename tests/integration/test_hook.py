"""End-to-end hook scenarios: envelope in, stderr report and exit status out."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from entitylint.cli import main
from entitylint.config import EntityLintConfig
from entitylint.hook import parse_envelope, run_hook
from entitylint.syntax import SyntaxGate
from tests._fixtures.entity_builder import FakePhpLint

SCENARIO_A = """
<?php

use Doctrine\\ORM\\Mapping as ORM;

#[ORM\\Entity]
class Post
{
    #[ORM\\Id]
    #[ORM\\Column(type: 'integer')]
    private int $id;
}
"""

SCENARIO_B = """
<?php

namespace App\\Entity;

use Doctrine\\ORM\\Mapping as ORM;

#[ORM\\Entity]
class Author
{
    #[ORM\\Id]
    #[ORM\\GeneratedValue]
    #[ORM\\Column]
    private ?int $id = null;

    #[ORM\\Column(length: 255)]
    public string $name;
}
"""

SCENARIO_C = """
<?php

namespace App\\Entity;

use Doctrine\\ORM\\Mapping as ORM;

#[ORM\\Entity]
class Product
{
    #[ORM\\Id]
    #[ORM\\GeneratedValue]
    #[ORM\\Column]
    private ?int $id = null;

    #[ORM\\Column(type: 'decimal')]
    private string $price;
}
"""

SCENARIO_D = """
<?php

namespace App\\Entity;

use Doctrine\\Common\\Collections\\ArrayCollection;
use Doctrine\\Common\\Collections\\Collection;
use Doctrine\\ORM\\Mapping as ORM;

#[ORM\\Entity]
class Category
{
    #[ORM\\Id]
    #[ORM\\GeneratedValue]
    #[ORM\\Column]
    private ?int $id = null;

    #[ORM\\OneToMany(targetEntity: Category::class)]
    private Collection $children;
}
"""

SCENARIO_D_FIXED = """
<?php

namespace App\\Entity;

use Doctrine\\Common\\Collections\\ArrayCollection;
use Doctrine\\Common\\Collections\\Collection;
use Doctrine\\ORM\\Mapping as ORM;

#[ORM\\Entity]
class Category
{
    #[ORM\\Id]
    #[ORM\\GeneratedValue]
    #[ORM\\Column]
    private ?int $id = null;

    #[ORM\\OneToMany(targetEntity: Category::class, mappedBy: 'parent')]
    private Collection $children;

    public function __construct()
    {
        $this->children = new ArrayCollection();
    }
}
"""

SCENARIO_E = """
<?php

namespace App\\Entity;

use Doctrine\\ORM\\Mapping as ORM;

#[ORM\\Embeddable]
class Address
{
    #[ORM\\Column(type: 'string', length: 100)]
    private string $street;

    #[ORM\\ManyToOne(targetEntity: Country::class)]
    private ?Country $country = null;
}
"""

SCENARIO_F = """
<?php

class Broken
{
    public $name;
"""

PARSE_ERROR = "PHP Parse error:  syntax error, unexpected end of file in Broken.php on line 6\nErrors parsing Broken.php"


def _run(path: Path, runner: FakePhpLint | None = None) -> tuple[int, str]:
    stream = io.StringIO()
    request = parse_envelope(json.dumps({"tool_input": {"file_path": str(path)}, "cwd": str(path.parent)}))
    assert request is not None
    status = run_hook(request, EntityLintConfig(root=path.parent), stream, runner=runner or FakePhpLint())
    return status, stream.getvalue()


def test_scenario_a_missing_namespace(entity_files) -> None:
    path = entity_files.write("src/Entity/Post.php", SCENARIO_A)

    status, output = _run(path)

    assert status == 2
    assert output == (
        "Entity validation errors in Post.php:\n"
        "Missing namespace declaration - entities should be namespaced\n"
    )


def test_scenario_b_public_property_and_readonly_fix(entity_files) -> None:
    path = entity_files.write("src/Entity/Author.php", SCENARIO_B)
    status, output = _run(path)
    assert status == 2
    assert "Public properties" in output

    entity_files.write("src/Entity/Author.php", SCENARIO_B.replace("public string", "public readonly string"))
    assert _run(path) == (0, "")


def test_scenario_c_decimal_without_precision(entity_files) -> None:
    path = entity_files.write("src/Entity/Product.php", SCENARIO_C)

    status, output = _run(path)

    assert status == 2
    assert "precision" in output
    assert "scale" in output


def test_scenario_d_one_to_many_without_mapped_by(entity_files) -> None:
    path = entity_files.write("src/Entity/Category.php", SCENARIO_D)
    status, output = _run(path)
    assert status == 2
    assert "OneToMany" in output
    assert "mappedBy" in output

    entity_files.write("src/Entity/Category.php", SCENARIO_D_FIXED)
    assert _run(path) == (0, "")


def test_scenario_e_embeddable_with_association(entity_files) -> None:
    path = entity_files.write("src/Entity/Address.php", SCENARIO_E)

    status, output = _run(path)

    assert status == 2
    assert "Embeddable" in output
    assert "cannot contain associations" in output


def test_scenario_f_syntax_error_suppresses_rules(entity_files) -> None:
    path = entity_files.write("src/Entity/Broken.php", SCENARIO_F)

    status, output = _run(path, FakePhpLint(exit_code=255, output=PARSE_ERROR))

    assert status == 2
    assert output == f"Entity validation errors in Broken.php:\nPHP syntax error:\n{PARSE_ERROR}\n"
    assert "Public properties" not in output
    assert "Missing namespace" not in output


def test_validation_is_idempotent(entity_files) -> None:
    path = entity_files.write("src/Entity/Category.php", SCENARIO_D)
    assert _run(path) == _run(path)


def test_relative_paths_resolve_against_cwd(entity_files) -> None:
    entity_files.write("src/Entity/Post.php", SCENARIO_A)
    envelope = json.dumps({"tool_input": {"file_path": "src/Entity/Post.php"}, "cwd": str(entity_files.path())})

    request = parse_envelope(envelope)

    assert request is not None
    assert request.file_path == entity_files.path() / "src/Entity/Post.php"
    assert request.cwd == entity_files.path()


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "not json",
        "[1, 2]",
        json.dumps({"tool_input": "oops"}),
        json.dumps({"tool_input": {}}),
        json.dumps({"tool_input": {"file_path": 42}}),
    ],
)
def test_unusable_envelopes_are_ignored(raw: str) -> None:
    assert parse_envelope(raw) is None


def test_cli_hook_mode_reports_on_stderr_only(entity_files, monkeypatch, capsys) -> None:
    path = entity_files.write("src/Entity/Post.php", SCENARIO_A)
    lint = FakePhpLint()
    monkeypatch.setattr(SyntaxGate, "_default_runner", staticmethod(lint))
    envelope = json.dumps({"tool_input": {"file_path": str(path)}, "cwd": str(entity_files.path())})
    monkeypatch.setattr("sys.stdin", io.StringIO(envelope))

    status = main(["hook"])

    captured = capsys.readouterr()
    assert status == 2
    assert captured.out == ""
    assert "Missing namespace" in captured.err
    assert lint.commands == [("php", "-l", str(path))]


def test_cli_hook_mode_exits_cleanly_for_other_files(entity_files, monkeypatch, capsys) -> None:
    path = entity_files.write("README.md", "# hello\n")
    envelope = json.dumps({"tool_input": {"file_path": str(path)}})
    monkeypatch.setattr("sys.stdin", io.StringIO(envelope))

    assert main(["hook"]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_cli_hook_mode_ignores_garbage_input(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("{not json"))

    assert main(["hook"]) == 0
    assert capsys.readouterr().err == ""


def test_cli_hook_mode_broken_config_stays_silent_for_other_files(entity_files, monkeypatch, capsys) -> None:
    entity_files.write(".entitylint.yml", "rules: [unclosed\n")
    path = entity_files.write("README.md", "# hello\n")
    envelope = json.dumps({"tool_input": {"file_path": str(path)}, "cwd": str(entity_files.path())})
    monkeypatch.setattr("sys.stdin", io.StringIO(envelope))

    assert main(["hook"]) == 0
    assert capsys.readouterr().err == ""


def test_cli_hook_mode_broken_config_falls_back_to_defaults(entity_files, monkeypatch, capsys) -> None:
    entity_files.write(".entitylint.yml", "rules: [unclosed\n")
    path = entity_files.write("src/Entity/Post.php", SCENARIO_A)
    monkeypatch.setattr(SyntaxGate, "_default_runner", staticmethod(FakePhpLint()))
    envelope = json.dumps({"tool_input": {"file_path": str(path)}, "cwd": str(entity_files.path())})
    monkeypatch.setattr("sys.stdin", io.StringIO(envelope))

    assert main(["hook"]) == 2
    err = capsys.readouterr().err
    assert err.startswith("Entity validation errors in Post.php:\n")
    assert "Ignoring configuration" not in err


def test_cli_hook_mode_survives_unopenable_log_file(entity_files, monkeypatch, capsys) -> None:
    entity_files.write(".entitylint.yml", "log_file: missing/dir/x.log\n")
    path = entity_files.write("README.md", "# hello\n")
    envelope = json.dumps({"tool_input": {"file_path": str(path)}, "cwd": str(entity_files.path())})
    monkeypatch.setattr("sys.stdin", io.StringIO(envelope))

    assert main(["hook"]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""
    assert not (entity_files.path() / "missing").exists()
