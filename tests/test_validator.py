"""
Tests for reply validation
"""
from december.tools.changeset import ChangeSet, RenameFile, WriteFile
from december.tools.validator import (
    ResponseValidator,
    normalize_path,
    resolve_specifier,
)


def block(*operations):
    return ChangeSet(list(operations)).render()


def test_valid_reply(valid_reply):
    report = ResponseValidator().validate_implementation(valid_reply)

    assert report.ok
    assert report.violations == []
    assert report.changeset.written_paths() == ["src/components/ContactForm.tsx"]


def test_missing_block():
    report = ResponseValidator().validate_implementation("Here is how I would do it.")

    assert report.codes() == ["missing_code_block"]
    assert not report.ok


def test_multiple_blocks():
    reply = block(WriteFile("a.ts", "export const a = 1;")) + "\n" + block(WriteFile("b.ts", "export const b = 2;"))

    report = ResponseValidator().validate_implementation(reply)

    assert "multiple_code_blocks" in report.codes()
    assert report.changeset is None


def test_unterminated_block():
    report = ResponseValidator().validate_implementation('<dec-code>\n<dec-write file_path="a.ts">x</dec-write>')

    assert "unterminated_code_block" in report.codes()
    assert "missing_code_block" not in report.codes()


def test_operation_outside_block(valid_reply):
    reply = valid_reply + '\n<dec-delete file_path="src/old.ts"></dec-delete>'

    report = ResponseValidator().validate_implementation(reply)

    assert report.codes() == ["operation_outside_block"]
    assert report.errors[0].path == "src/old.ts"


def test_paths_must_stay_in_project():
    reply = block(WriteFile("/etc/passwd", "x"), WriteFile("../outside.ts", "x"))

    report = ResponseValidator().validate_implementation(reply)

    assert report.codes() == ["invalid_path", "invalid_path"]


def test_missing_path():
    reply = '<dec-code><dec-write>const a = 1;</dec-write></dec-code>'

    report = ResponseValidator().validate_implementation(reply)

    assert report.codes() == ["missing_path"]


def test_incomplete_content():
    content = "export function App() {\n  // ... rest of code\n}"

    report = ResponseValidator().validate_implementation(block(WriteFile("src/App.tsx", content)))

    assert report.codes() == ["incomplete_content"]


def test_length_guidelines_are_warnings():
    content = "\n".join(f"const v{i} = {i};" for i in range(60))
    validator = ResponseValidator(max_file_lines=50, max_component_lines=40)

    report = validator.validate_implementation(block(WriteFile("src/Big.tsx", content)))

    assert report.ok
    assert [w.code for w in report.warnings] == ["file_too_long", "component_too_long"]


def test_duplicate_write_is_a_warning():
    reply = block(WriteFile("a.ts", "export const a = 1;"), WriteFile("./a.ts", "export const a = 2;"))

    report = ResponseValidator().validate_implementation(reply)

    assert report.ok
    assert report.codes() == ["duplicate_write"]


def test_imports_resolve_against_block_and_project():
    app = 'import { Button } from "./components/Button";\nimport "@/styles/app.css";\nimport React from "react";'
    reply = block(
        WriteFile("src/App.tsx", app),
        WriteFile("src/components/Button.tsx", "export const Button = () => null;"),
    )

    report = ResponseValidator().validate_implementation(reply, existing_files=["src/styles/app.css"])

    assert report.ok


def test_unresolved_import():
    app = 'import { Header } from "./components/Header";'

    report = ResponseValidator().validate_implementation(block(WriteFile("src/App.tsx", app)))

    assert report.codes() == ["unresolved_import"]
    assert report.errors[0].path == "src/App.tsx"


def test_rename_updates_available_files():
    app = 'import Nav from "./Nav";'
    reply = block(RenameFile("src/Navbar.tsx", "src/Nav.tsx"), WriteFile("src/App.tsx", app))

    report = ResponseValidator().validate_implementation(reply, existing_files=["src/Navbar.tsx"])

    assert report.ok


def test_directory_index_import():
    app = 'import { api } from "../lib";'
    reply = block(WriteFile("src/pages/Home.tsx", app))

    report = ResponseValidator().validate_implementation(reply, existing_files=["src/lib/index.ts"])

    assert report.ok


def test_explanation_must_not_carry_code(valid_reply):
    validator = ResponseValidator()

    assert validator.validate_explanation("Routing maps URLs to components.").ok
    report = validator.validate_explanation(valid_reply)
    assert report.codes() == ["code_block_in_explanation"]


def test_feedback_lists_errors():
    report = ResponseValidator().validate_implementation("no code")

    feedback = report.to_feedback()

    assert feedback.startswith("Your previous reply broke the output rules:")
    assert "- The reply has no <dec-code> block." in feedback


def test_path_helpers():
    assert normalize_path("./src//a.ts") == "src/a.ts"
    assert resolve_specifier("src/pages/Home.tsx", "../lib/api") == "src/lib/api"
    assert resolve_specifier("src/App.tsx", "@/hooks/useX") == "src/hooks/useX"
    assert resolve_specifier("src/App.tsx", "react") is None
