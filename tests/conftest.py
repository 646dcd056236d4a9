"""
Pytest configuration and fixtures
"""
from types import SimpleNamespace

import pytest

from december.classifier import RequestClassifier
from december.library import ExampleLibrary
from december.memory import MemoryManager
from december.utils.config import DEFAULT_EXAMPLES_DIR, reset_config

REQUIRED_ENV = {
    "SLACK_BOT_TOKEN": "xoxb-test",
    "SLACK_APP_TOKEN": "xapp-test",
    "SLACK_SIGNING_SECRET": "secret",
    "OPENAI_API_KEY": "sk-test",
}

OPTIONAL_ENV = (
    "OPENAI_MODEL", "OPENAI_TEMPERATURE", "MAX_CLARIFICATION_ROUNDS", "STATE_ASSUMPTIONS",
    "MAX_FILE_LINES", "MAX_COMPONENT_LINES", "MAX_REPAIR_ATTEMPTS", "EXAMPLES_DIR", "MAX_EXAMPLES",
)

VALID_REPLY = """Added the contact form.
<dec-code>
<dec-write file_path="src/components/ContactForm.tsx">
export function ContactForm() {
  return <form className="flex flex-col gap-2" />;
}
</dec-write>
</dec-code>"""


class FakeCompletions:
    """Scripted stand-in for client.chat.completions."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    async def create(self, **kwargs):
        # Copy: the agent keeps appending to the same list
        self.calls.append({**kwargs, "messages": [dict(m) for m in kwargs["messages"]]})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, replies=()):
        self.completions = FakeCompletions(replies)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def config_env(monkeypatch):
    """Environment with every required variable set and a fresh config."""
    for name, value in REQUIRED_ENV.items():
        monkeypatch.setenv(name, value)
    for name in OPTIONAL_ENV:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def classifier():
    return RequestClassifier(max_clarification_rounds=2)


@pytest.fixture
def library():
    return ExampleLibrary(DEFAULT_EXAMPLES_DIR, max_examples=3)


@pytest.fixture
def memory():
    return MemoryManager()


@pytest.fixture
def make_agent(config_env, memory):
    """Build an Agent around a scripted OpenAI client."""
    from december.agent import Agent

    def _make(replies=(), library=None):
        client = FakeOpenAI(replies)
        agent = Agent(memory=memory, library=library, client=client)
        return agent, client.completions

    return _make


@pytest.fixture
def valid_reply():
    return VALID_REPLY
