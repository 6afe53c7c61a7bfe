"""Tests for documentation assembly and JSON output."""

import json

from orddocs.config import DocsConfig
from orddocs.conftest import write_project
from orddocs.generators import (
    Accumulator,
    ExtractionContext,
    build_documentation,
    extract_file,
    finalize,
    generate_docs,
    generate_json,
    merge,
    write_docs,
)
from orddocs.models import Documentation, FileExtraction, MethodDoc, TypeDoc


def _type(name, source_file="a.ts"):
    return TypeDoc(name=name, kind="enum", description="", source_file=source_file, values=("x",))


def _method(name):
    return MethodDoc(
        name=name,
        description="",
        parameters=(),
        endpoint="",
        http_method="GET",
        return_type="void",
        recursive=False,
        source_file="client.ts",
    )


def test_generate_docs(ts_project):
    documentation, sources = generate_docs(DocsConfig(root=ts_project))

    assert len(sources) == 5
    assert [m.name for m in documentation.methods] == [
        "getBlockHashByHeight",
        "getBlockHeightRecursive",
        "getInscriptionsByIds",
        "getServerStatus",
    ]
    assert [t.name for t in documentation.types] == ["ServerStatus", "Status", "Time"]


def test_generated_methods(ts_project):
    documentation, _ = generate_docs(DocsConfig(root=ts_project))
    methods = {m.name: m for m in documentation.methods}

    by_height = methods["getBlockHashByHeight"]
    assert by_height.endpoint == "/blockhash/{height}"
    assert by_height.http_method == "GET"
    assert by_height.source_file == "src/client.ts"
    assert by_height.parameters[0].description == "Block height to get hash for"

    assert methods["getBlockHeightRecursive"].recursive is True
    assert methods["getInscriptionsByIds"].http_method == "POST"
    assert methods["getServerStatus"].description == ""
    assert methods["getServerStatus"].endpoint == "/status"


def test_generated_types(ts_project):
    documentation, _ = generate_docs(DocsConfig(root=ts_project))
    types = {t.name: t for t in documentation.types}

    status = types["ServerStatus"]
    assert status.description == "Status and statistics of the ord server."
    assert status.source_file == "src/schemas/status.ts"
    assert [(p.name, p.type, p.description) for p in status.properties] == [
        ("chain", "string", "Network the server indexes"),
        ("height", "number", "Latest indexed block height"),
        ("minimum_rune_for_next_block", "string | null", ""),
        ("uptime", "Time", ""),
    ]

    assert types["Status"].values == ("active", "inactive")
    assert types["Status"].description == "Lifecycle state."
    assert types["Time"].description == ""


def test_json_shape(ts_project):
    documentation, _ = generate_docs(DocsConfig(root=ts_project))
    data = json.loads(generate_json(documentation))

    assert list(data) == ["methods", "types"]
    method = data["methods"][0]
    assert set(method) == {
        "name",
        "description",
        "parameters",
        "endpoint",
        "httpMethod",
        "returnType",
        "recursive",
        "sourceFile",
    }
    assert method["returnType"] == "Promise<BlockHash>"

    types = {t["name"]: t for t in data["types"]}
    assert "properties" in types["ServerStatus"] and "values" not in types["ServerStatus"]
    assert types["Status"]["values"] == ["active", "inactive"]
    assert "properties" not in types["Status"]


def test_generate_json_is_deterministic(ts_project):
    first = generate_json(generate_docs(DocsConfig(root=ts_project))[0])
    second = generate_json(generate_docs(DocsConfig(root=ts_project))[0])
    assert first == second
    assert first.endswith("}\n")


def test_later_file_replaces_type(tmp_path):
    write_project(
        tmp_path,
        {
            "src/a.ts": "export const StatusSchema = z.enum(['old']);\n",
            "src/b.ts": "export const StatusSchema = z.enum(['new']);\n",
        },
    )
    context = ExtractionContext(root=tmp_path)
    paths = [tmp_path / "src/b.ts", tmp_path / "src/a.ts"]

    documentation = build_documentation(paths, context)

    [status] = documentation.types
    assert status.values == ("new",)
    assert status.source_file == "src/b.ts"


def test_methods_not_deduplicated(tmp_path):
    client = "export class C {\n  async ping(): Promise<void> {}\n}\n"
    write_project(tmp_path, {"a.ts": client, "b.ts": client})
    context = ExtractionContext(root=tmp_path)

    documentation = build_documentation([tmp_path / "a.ts", tmp_path / "b.ts"], context)

    assert [m.source_file for m in documentation.methods] == ["a.ts", "b.ts"]


def test_merge_returns_new_accumulator():
    acc = Accumulator()
    extraction = FileExtraction("a.ts", types=(_type("Rune"),), methods=(_method("getRune"),))

    merged = merge(acc, extraction)

    assert acc.types == {} and acc.methods == () and acc.files == 0
    assert set(merged.types) == {"Rune"}
    assert merged.methods == (_method("getRune"),)
    assert merged.files == 1


def test_finalize_sorts_by_name():
    acc = Accumulator(
        types={"Sat": _type("Sat"), "Block": _type("Block")},
        methods=(_method("getSat"), _method("getBlock")),
    )
    documentation = finalize(acc)
    assert [m.name for m in documentation.methods] == ["getBlock", "getSat"]
    assert [t.name for t in documentation.types] == ["Block", "Sat"]


def test_finalize_sort_ignores_case():
    acc = Accumulator(
        types={"runeId": _type("runeId"), "RuneEntry": _type("RuneEntry"), "Rune": _type("Rune")},
        methods=(_method("getBlockTime"), _method("getBlocksLatest"), _method("getBlock")),
    )
    documentation = finalize(acc)
    assert [m.name for m in documentation.methods] == ["getBlock", "getBlocksLatest", "getBlockTime"]
    assert [t.name for t in documentation.types] == ["Rune", "RuneEntry", "runeId"]


def test_extract_file_skips_type_pass_without_markers(tmp_path):
    path = tmp_path / "primitives.ts"
    path.write_text("export const BlockHashSchema = z.string();\n")

    extraction = extract_file(path, ExtractionContext(root=tmp_path))

    assert extraction.source_file == "primitives.ts"
    assert extraction.types == ()
    assert extraction.methods == ()


def test_extract_file_unreadable(tmp_path):
    extraction = extract_file(tmp_path / "missing.ts", ExtractionContext(root=tmp_path))
    assert extraction == FileExtraction("missing.ts")


def test_empty_documentation():
    assert json.loads(generate_json(Documentation())) == {"methods": [], "types": []}


def test_write_docs_creates_directories(tmp_path):
    output = tmp_path / "docs" / "nested" / "api-docs.json"
    write_docs(output, Documentation(types=(_type("Rune"),)))

    data = json.loads(output.read_text())
    assert data["types"][0]["name"] == "Rune"
