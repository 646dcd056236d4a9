"""
Tests for the agent loop
"""
from december.classifier import Disposition
from december.tools.changeset import parse_response

PROSE = "Routing maps URLs to components. React Router matches the path and renders the route element."


async def test_clarify_never_calls_the_model(make_agent, memory):
    agent, completions = make_agent()

    reply = await agent.process("U1", "Add authentication to the app", "D1")

    assert reply.startswith("Before I start, I need one detail:")
    assert completions.calls == []
    history = memory.get_history("U1")
    assert history[-1].disposition == Disposition.CLARIFY
    assert history[-1].asked_terms == ("authentication",)


async def test_answer_to_clarification_is_implemented(make_agent, valid_reply):
    agent, completions = make_agent([valid_reply])

    await agent.process("U1", "Add authentication to the app", "D1")
    reply = await agent.process("U1", "JWT", "D1")

    assert reply.startswith("*Assumptions*\n- Assumption (")
    assert reply.endswith(valid_reply)
    assert len(parse_response(reply).blocks) == 1

    messages = completions.calls[0]["messages"]
    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert messages[-1]["content"] == "JWT"
    assert completions.calls[0]["model"] == "gpt-4o"


async def test_explanation(make_agent, memory):
    agent, completions = make_agent([PROSE])

    reply = await agent.process("U1", "How does routing work?", "D1")

    assert reply == PROSE
    assert "## Task: Explain" in completions.calls[0]["messages"][0]["content"]
    assert memory.get_history("U1")[-1].disposition == Disposition.EXPLAIN


async def test_explanation_with_code_is_repaired_then_stripped(make_agent, valid_reply):
    agent, completions = make_agent([valid_reply, valid_reply])

    reply = await agent.process("U1", "How does routing work?", "D1")

    assert len(completions.calls) == 2
    feedback = completions.calls[1]["messages"][-1]["content"]
    assert feedback.startswith("Your previous reply broke the output rules:")
    assert reply == "Added the contact form."
    assert "<dec-code>" not in reply


async def test_implementation_is_repaired(make_agent, valid_reply):
    agent, completions = make_agent(["Sure, here is the idea without code.", valid_reply])

    reply = await agent.process("U1", "Add a dark mode toggle button", "D1")

    assert len(completions.calls) == 2
    assert "no <dec-code> block" in completions.calls[1]["messages"][-1]["content"]
    assert reply.endswith(valid_reply)


async def test_repairs_are_bounded(make_agent):
    agent, completions = make_agent(["no code", "still no code"])

    reply = await agent.process("U1", "Add a dark mode toggle button", "D1")

    assert len(completions.calls) == 2
    assert reply.endswith("still no code")


async def test_example_request_round_trip(make_agent, library, valid_reply):
    request = '<dec-read-examples topics="forms"></dec-read-examples>'
    agent, completions = make_agent([request, valid_reply], library=library)

    reply = await agent.process("U1", "Add a dark mode toggle button", "D1")

    assert len(completions.calls) == 2
    followup = completions.calls[1]["messages"][-1]["content"]
    assert "## Examples" in followup
    assert "### forms (forms.md)" in followup
    assert reply.endswith(valid_reply)


async def test_unknown_example_topic(make_agent, library, valid_reply):
    request = '<dec-read-examples topics="quantum"></dec-read-examples>'
    agent, completions = make_agent([request, valid_reply], library=library)

    await agent.process("U1", "Add a dark mode toggle button", "D1")

    followup = completions.calls[1]["messages"][-1]["content"]
    assert followup.startswith("No example documents matched quantum.")
    assert "forms" in followup


async def test_model_errors_become_a_reply(make_agent):
    agent, _ = make_agent([RuntimeError("rate limited")])

    reply = await agent.process("U1", "How does routing work?", "D1")

    assert reply == "I encountered an error: rate limited"


async def test_clear_conversation(make_agent, memory):
    agent, _ = make_agent()
    await agent.process("U1", "Add authentication to the app", "D1")

    agent.clear_conversation("U1")

    assert memory.get_history("U1") == []


async def test_failed_answer_can_be_retried(make_agent, memory, valid_reply):
    agent, _ = make_agent([RuntimeError("rate limited"), valid_reply])

    await agent.process("U1", "Add authentication to the app", "D1")
    failed = await agent.process("U1", "JWT", "D1")

    assert failed == "I encountered an error: rate limited"
    assert len(memory.get_history("U1")) == 2

    reply = await agent.process("U1", "JWT", "D1")

    assert reply.endswith(valid_reply)
    history = memory.get_history("U1")
    assert [turn.role for turn in history] == ["user", "assistant", "user", "assistant"]
    assert history[-1].disposition == Disposition.IMPLEMENT


async def test_examples_follow_the_answered_request(make_agent, library, valid_reply):
    agent, completions = make_agent([valid_reply], library=library)

    await agent.process("U1", "Create a contact form", "D1")
    await agent.process("U1", "Name, email and message", "D1")

    system = completions.calls[0]["messages"][0]["content"]
    assert "### forms (forms.md)" in system
