"""Tests for the PHP structure analyzer."""

from __future__ import annotations

import textwrap

from repoprobe.analyzers import StructureAnalyzer

USER_MODEL = textwrap.dedent(
    r"""
    <?php

    namespace App\Models;

    use Illuminate\Database\Eloquent\Model;
    use Illuminate\Contracts\Auth\Authenticatable;

    class User extends Model implements Authenticatable
    {
        use HasFactory;
        use \App\Concerns\Auditable;

        const ROLE_ADMIN = 'admin';
        protected $fillable = ['name'];
        private static ?string $cache = null;

        public function posts(): HasMany
        {
            return $this->hasMany(Post::class);
        }

        public static function boot()
        {
        }

        protected function secret(string $key, int $n = 1): ?string
        {
        }
    }

    class Second extends Other
    {
    }
    """
).lstrip("\n")


def test_analyze_reports_primary_class() -> None:
    table = StructureAnalyzer().analyze(USER_MODEL, file="app/Models/User.php")

    assert table.namespace == "App\\Models"
    assert table.class_name == "User"
    assert table.class_type == "class"
    assert table.extends == "Model"
    assert table.implements == ["Authenticatable"]
    assert table.full_class_name == "App\\Models\\User"


def test_analyze_separates_traits_from_imports() -> None:
    table = StructureAnalyzer().analyze(USER_MODEL)

    assert table.traits == ["HasFactory"]
    assert [(item.statement, item.line) for item in table.imports] == [
        ("Illuminate\\Database\\Eloquent\\Model", 5),
        ("Illuminate\\Contracts\\Auth\\Authenticatable", 6),
        ("\\App\\Concerns\\Auditable", 11),
    ]


def test_analyze_collects_members_with_line_numbers() -> None:
    table = StructureAnalyzer().analyze(USER_MODEL)

    assert [(c.name, c.visibility, c.line) for c in table.constants] == [("ROLE_ADMIN", "public", 13)]
    assert [(p.name, p.visibility, p.is_static, p.type, p.line) for p in table.properties] == [
        ("fillable", "protected", False, None, 14),
        ("cache", "private", True, "?string", 15),
    ]
    assert [
        (m.name, m.visibility, m.is_static, m.params, m.return_type, m.line) for m in table.methods
    ] == [
        ("posts", "public", False, None, "HasMany", 17),
        ("boot", "public", True, None, None, 22),
        ("secret", "protected", False, "string $key, int $n = 1", "?string", 26),
    ]


def test_analyze_first_namespace_and_class_win() -> None:
    source = "namespace First;\nclass A extends Base\nnamespace Second;\ninterface B\n"

    table = StructureAnalyzer().analyze(source)

    assert table.namespace == "First"
    assert table.class_name == "A"
    assert table.class_type == "class"
    assert table.extends == "Base"


def test_analyze_without_class_or_namespace() -> None:
    table = StructureAnalyzer().analyze("<?php\n\nreturn ['debug' => true];\n", file="config/app.php")

    payload = table.to_dict()
    assert payload["className"] is None
    assert payload["namespace"] is None
    assert payload["fullClassName"] is None
    assert payload["methods"] == []


def test_to_dict_uses_camel_case_keys() -> None:
    payload = StructureAnalyzer().analyze(USER_MODEL, file="app/Models/User.php").to_dict()

    assert payload["file"] == "app/Models/User.php"
    assert payload["classType"] == "class"
    assert payload["fullClassName"] == "App\\Models\\User"
    assert payload["methods"][1] == {
        "name": "boot",
        "visibility": "public",
        "isStatic": True,
        "params": None,
        "returnType": None,
        "line": 22,
    }
    assert payload["properties"][1]["isStatic"] is True
