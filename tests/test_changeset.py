"""
Tests for change-set rendering and reply parsing
"""
from december.tools.changeset import (
    AddDependency,
    ChangeSet,
    DeleteFile,
    RenameFile,
    WriteFile,
    parse_example_requests,
    parse_response,
)


def test_render_nests_every_operation_in_one_block():
    changeset = ChangeSet()
    changeset.add(WriteFile("src/App.tsx", "export default function App() {}"))
    changeset.add(RenameFile("src/a.ts", "src/b.ts"))
    changeset.add(DeleteFile("src/old.css"))
    changeset.add(AddDependency(("zod",)))

    text = changeset.render()

    assert text.startswith("<dec-code>\n")
    assert text.endswith("\n</dec-code>")
    assert text.count("<dec-code>") == 1
    assert '<dec-write file_path="src/App.tsx">' in text
    assert "<dec-add-dependency>zod</dec-add-dependency>" in text


def test_empty_changeset_renders_an_empty_block():
    changeset = ChangeSet()

    assert changeset.is_empty()
    assert changeset.render() == "<dec-code>\n</dec-code>"


def test_parse_reply():
    reply = """I added a hook and removed the old file.
<dec-code>
<dec-write file_path="src/hooks/useTheme.ts">
export const useTheme = () => "dark";
</dec-write>
<dec-delete file_path="src/theme.js"></dec-delete>
<dec-add-dependency>clsx tailwind-merge</dec-add-dependency>
</dec-code>
Let me know if you want a toggle too."""

    parsed = parse_response(reply)

    assert len(parsed.blocks) == 1
    changeset = parsed.changeset
    assert changeset.written_paths() == ["src/hooks/useTheme.ts"]
    assert changeset.writes()[0].content == 'export const useTheme = () => "dark";'
    assert changeset.operations[1] == DeleteFile("src/theme.js")
    assert changeset.dependencies() == ["clsx", "tailwind-merge"]
    assert parsed.stray_operations == []
    assert parsed.prose.startswith("I added a hook")
    assert parsed.prose.endswith("toggle too.")
    assert parsed.has_code()


def test_code_fences_inside_write_are_stripped():
    reply = '<dec-code><dec-write file_path="a.ts">\n```ts\nconst a = 1;\n```\n</dec-write></dec-code>'

    parsed = parse_response(reply)

    assert parsed.changeset.writes()[0].content == "const a = 1;"


def test_self_closing_tags():
    reply = '<dec-code><dec-rename original_file_path="a.ts" new_file_path="b.ts" /></dec-code>'

    parsed = parse_response(reply)

    assert parsed.changeset.operations == [RenameFile("a.ts", "b.ts")]


def test_stray_and_unclosed():
    reply = '<dec-delete file_path="x.ts"></dec-delete>\n<dec-code>\n<dec-write file_path="a.ts">1</dec-write>'

    parsed = parse_response(reply)

    assert parsed.blocks == []
    assert parsed.unclosed_blocks == 1
    assert DeleteFile("x.ts") in parsed.stray_operations
    assert parsed.changeset is None


def test_plain_text_has_no_code():
    parsed = parse_response("Routing maps URLs to components.")

    assert not parsed.has_code()
    assert parsed.prose == "Routing maps URLs to components."


def test_example_requests():
    text = '<dec-read-examples topics="forms, authentication"></dec-read-examples>'

    assert parse_example_requests(text) == ["forms", "authentication"]
    assert parse_response(text).example_requests == ["forms", "authentication"]
    assert parse_response(text).prose == ""
