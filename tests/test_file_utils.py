import codecs

import pytest

from chattool.errors import ArtifactBinaryRejected, ArtifactError, ArtifactNotFound, ArtifactTooLarge
from chattool.file_utils import MAX_SEND_BYTES, decode_text, file_message, ingest_file, language_hint_for


def test_body_is_raw_text(tmp_path):
    raw = "line one\r\nline two\n\n\ttabbed  \n"
    path = tmp_path / "Program.cs"
    path.write_bytes(raw.encode("utf-8"))
    block = ingest_file(path)
    assert block.body == raw
    assert block.language_hint == "csharp"
    assert block.label == "Program.cs"


def test_render_fences_with_hint(tmp_path):
    path = tmp_path / "app.csproj"
    path.write_text("<Project />", encoding="utf-8")
    block = ingest_file(path)
    assert block.render() == "```xml\n<Project />\n```"
    msg = file_message(path, block)
    assert msg.startswith(f"Here is the file `app.csproj` from `{path}`:")


def test_unknown_extension_has_no_hint(tmp_path):
    path = tmp_path / "notes.weird"
    path.write_text("x", encoding="utf-8")
    assert ingest_file(path).render() == "```\nx\n```"
    assert language_hint_for(tmp_path / "a.sln") == ""


def test_missing_file(tmp_path):
    with pytest.raises(ArtifactNotFound):
        ingest_file(tmp_path / "nope.cs")


def test_directory_is_not_a_file(tmp_path):
    with pytest.raises(ArtifactNotFound):
        ingest_file(tmp_path)


def test_too_large(tmp_path):
    path = tmp_path / "big.cs"
    path.write_bytes(b"a" * (MAX_SEND_BYTES + 1))
    with pytest.raises(ArtifactTooLarge) as exc:
        ingest_file(path)
    assert str(MAX_SEND_BYTES + 1) in str(exc.value)


def test_exactly_at_limit_is_allowed(tmp_path):
    path = tmp_path / "edge.txt"
    path.write_bytes(b"a" * MAX_SEND_BYTES)
    assert len(ingest_file(path).body) == MAX_SEND_BYTES


def test_size_checked_before_extension(tmp_path):
    path = tmp_path / "big.png"
    path.write_bytes(b"a" * (MAX_SEND_BYTES + 1))
    with pytest.raises(ArtifactTooLarge):
        ingest_file(path)


@pytest.mark.parametrize("name", ["lib.DLL", "pic.png", "doc.pdf", "a.zip"])
def test_binary_extensions_rejected(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b"\x00\x01")
    with pytest.raises(ArtifactBinaryRejected):
        ingest_file(path)


def test_unusable_path_is_an_artifact_error(tmp_path):
    with pytest.raises(ArtifactError):
        ingest_file(tmp_path / ("a" * 300 + ".cs"))


def test_utf8_bom_is_dropped(tmp_path):
    path = tmp_path / "bom.cs"
    path.write_bytes(codecs.BOM_UTF8 + "class A {}\r\n".encode("utf-8"))
    assert ingest_file(path).body == "class A {}\r\n"


@pytest.mark.parametrize("encoding", ["utf-16-le", "utf-16-be"])
def test_utf16_with_bom_is_decoded(tmp_path, encoding):
    bom = codecs.BOM_UTF16_LE if encoding == "utf-16-le" else codecs.BOM_UTF16_BE
    path = tmp_path / "wide.json"
    path.write_bytes(bom + '{"name": "Zoë"}\n'.encode(encoding))
    assert ingest_file(path).body == '{"name": "Zoë"}\n'


def test_invalid_utf8_is_replaced():
    assert decode_text(b"ok \xff") == "ok \ufffd"
