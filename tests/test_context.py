"""
Tests for context assembly and model-free replies
"""
import pytest

from december.agent.context import (
    MAX_LISTED_FILES,
    ContextAssembler,
    render_assumptions,
    render_clarification,
)
from december.classifier import Request


def classify(classifier, text):
    return classifier.classify(Request(text))


def test_implement_context(classifier, library):
    result = classify(classifier, "Create a contact form with name, email, and message fields")
    assembler = ContextAssembler(library=library)

    context = assembler.assemble(
        result,
        "Create a contact form with name, email, and message fields",
        conversation=[{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}],
        existing_files=["src/main.tsx", "src/App.tsx"],
    )

    system = context.system_message
    assert system.startswith("You are December")
    assert "## Task: Implement" in system
    assert "## Output Tags" in system
    assert "## Stated Assumptions" in system
    assert "- Assumption (styling): Tailwind CSS" in system
    assert "## Existing Files\n- src/App.tsx\n- src/main.tsx" in system
    assert "### forms (forms.md)" in system
    assert [doc.topic for doc in context.examples] == ["forms"]
    assert "\n\n\n" not in system

    messages = context.to_openai_messages()
    assert messages[0]["role"] == "system"
    assert [m["content"] for m in messages[1:]] == [
        "hi",
        "hello",
        "Create a contact form with name, email, and message fields",
    ]


def test_explain_context_has_no_tag_grammar(classifier):
    result = classify(classifier, "How does routing work?")

    context = ContextAssembler().assemble(result, "How does routing work?")

    assert "## Task: Explain" in context.system_message
    assert "## Output Tags" not in context.system_message
    assert context.examples == []


def test_clarify_is_not_assembled(classifier):
    result = classify(classifier, "Add authentication to the app")

    with pytest.raises(ValueError):
        ContextAssembler().assemble(result, "Add authentication to the app")


def test_long_file_lists_are_truncated(classifier):
    result = classify(classifier, "Add a dark mode toggle button")
    files = [f"src/f{i:04d}.ts" for i in range(MAX_LISTED_FILES + 5)]

    context = ContextAssembler().assemble(result, "Add a dark mode toggle button", existing_files=files)

    assert "- ... and 5 more" in context.system_message


def test_render_single_clarification(classifier):
    result = classify(classifier, "Add authentication to the app")

    text = render_clarification(result)
    lines = text.splitlines()

    assert lines[0] == "Before I start, I need one detail:"
    assert lines[2] == "1. *Which authentication method should be used?*"
    assert lines[3].startswith("   _Why:_ ")
    assert lines[4].startswith("   a) Session-based")
    assert lines[5].startswith("   b) Token-based")


def test_render_multiple_clarifications(classifier):
    result = classify(classifier, "Add authentication and a database")

    text = render_clarification(result)

    assert text.startswith("Before I start, I need 2 details:")
    assert "2. *Which database should be used?*" in text


def test_render_clarification_rejects_other_dispositions(classifier):
    with pytest.raises(ValueError):
        render_clarification(classify(classifier, "How does routing work?"))


def test_render_assumptions(classifier):
    implemented = classify(classifier, "Add a dark mode toggle button")
    explained = classify(classifier, "How does routing work?")

    text = render_assumptions(implemented)

    assert text.startswith("*Assumptions*\n- Assumption (")
    assert render_assumptions(explained) == ""
