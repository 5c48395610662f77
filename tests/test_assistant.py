import asyncio
import os
import random
import sys
import time
from types import SimpleNamespace

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from novel_studio.assistant import (
    CannedContentSource,
    ChatModelContentSource,
    PromptKind,
    WritingAssistant,
    build_content_source,
)
from novel_studio.assistant import templates
from novel_studio.errors import ValidationError
from novel_studio.models import DeepSeekModel, KimiModel, OpenAIModel, get_client

LONG_DRAFT = "The lighthouse keeper had not spoken to anyone in eleven days, and he liked it that way."


class FakeChatClient:
    def __init__(self, reply="A fresh paragraph."):
        self.reply = reply
        self.prompts = []

    def chat(self, prompt, **kwargs):
        self.prompts.append(prompt)
        return self.reply


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def canned():
    return CannedContentSource(rng=random.Random(7))


def test_prompt_kind_parse():
    assert PromptKind.parse("plot-hole") is PromptKind.PLOT_HOLE
    assert PromptKind.parse(" Continue ") is PromptKind.CONTINUE
    assert PromptKind.parse(PromptKind.ENDING) is PromptKind.ENDING
    assert PromptKind.parse("poetry") is None
    assert PromptKind.parse(None) is None


def test_continue_with_short_content_gets_preface(canned):
    text = canned.produce(PromptKind.CONTINUE, "Short.", "")
    assert text.startswith(templates.SHORT_CONTENT_PREFACE + " ")
    assert text[len(templates.SHORT_CONTENT_PREFACE) + 1:] in templates.CONTINUATIONS


def test_continue_with_prompt_appends_user_input(canned):
    text = canned.produce(PromptKind.CONTINUE, LONG_DRAFT, "  a storm arrives ")
    head, _, tail = text.partition("\n\n")
    assert head in templates.CONTINUATIONS
    assert tail == f'Based on your input: "a storm arrives"\n\n{templates.CONTINUE_PROMPT_TAIL}'


def test_continue_without_prompt_is_plain_template(canned):
    assert canned.produce(PromptKind.CONTINUE, LONG_DRAFT, "") in templates.CONTINUATIONS


@pytest.mark.parametrize("kind, prefix, options", [
    (PromptKind.DIALOGUE, "Scene: the harbour\n\n", templates.DIALOGUES),
    (PromptKind.DESCRIPTION, "Description of the harbour:\n\n", templates.DESCRIPTIONS),
    (PromptKind.PLOT_HOLE, "Addressing: the harbour\n\n", templates.PLOT_SOLUTIONS),
    (PromptKind.CONFLICT, "Conflict for: the harbour\n\n", templates.CONFLICTS),
    (PromptKind.ENDING, "Ending for: the harbour\n\n", templates.ENDINGS),
    (PromptKind.REWRITE, 'Based on your suggestion: "the harbour"\n\n', templates.REWRITES),
])
def test_prompt_frames_the_template(canned, kind, prefix, options):
    framed = canned.produce(kind, LONG_DRAFT, "the harbour")
    assert framed.startswith(prefix)
    assert framed[len(prefix):] in options

    assert canned.produce(kind, LONG_DRAFT, "") in options


def test_rewrite_needs_some_content(canned):
    assert canned.produce(PromptKind.REWRITE, "tiny", "make it better") == templates.REWRITE_NEEDS_CONTENT


def test_brainstorm_ignores_prompt(canned):
    assert canned.produce(PromptKind.BRAINSTORM, "", "anything") in templates.BRAINSTORMS


def test_outline_uses_prompt_as_topic(canned):
    assert "The Crossing" in canned.produce(PromptKind.OUTLINE, "", "The Crossing")
    assert "Untitled Chapter" in canned.produce(PromptKind.OUTLINE, "", "")


def test_unknown_kind(canned):
    assert canned.produce(None, LONG_DRAFT, "x") == templates.UNKNOWN_KIND


def test_same_seed_same_suggestion():
    first = CannedContentSource(rng=random.Random(3)).produce(PromptKind.DIALOGUE, "", "")
    second = CannedContentSource(rng=random.Random(3)).produce(PromptKind.DIALOGUE, "", "")
    assert first == second


def test_generate_remembers_current_suggestion(canned):
    assistant = WritingAssistant(canned, delay=0)

    suggestion = asyncio.run(assistant.generate("brainstorm"))

    assert suggestion in templates.BRAINSTORMS
    assert assistant.current_suggestion == suggestion


def test_generate_with_unknown_kind_string(canned):
    assistant = WritingAssistant(canned, delay=0)
    assert asyncio.run(assistant.generate("haiku", LONG_DRAFT)) == templates.UNKNOWN_KIND


def test_generate_reports_source_failure():
    assistant = WritingAssistant(ChatModelContentSource(FakeChatClient(reply=None)), delay=0)

    suggestion = asyncio.run(assistant.generate("continue", LONG_DRAFT))

    assert suggestion.startswith("Error: ")
    assert assistant.current_suggestion == suggestion


def test_insert_suggestion_at_cursor():
    assistant = WritingAssistant(delay=0)
    assistant.current_suggestion = " quietly"

    text, cursor = assistant.insert_suggestion("She left.", 8)

    assert text == "She left quietly."
    assert cursor == 16


def test_insert_suggestion_replaces_selection_and_clamps():
    assistant = WritingAssistant(delay=0)
    assistant.current_suggestion = "ran"

    assert assistant.insert_suggestion("She walked home.", 4, 10) == ("She ran home.", 7)
    assert assistant.insert_suggestion("abc", 99) == ("abcran", 6)


def test_insert_without_suggestion_fails():
    with pytest.raises(ValidationError):
        WritingAssistant(delay=0).insert_suggestion("text", 0)


def test_chat_source_builds_prompt_from_draft_tail():
    client = FakeChatClient()
    source = ChatModelContentSource(client, context_chars=20)

    assert source.produce(PromptKind.DESCRIPTION, LONG_DRAFT, " the lamp ") == "A fresh paragraph."

    prompt = client.prompts[0]
    assert "Writer's request: the lamp" in prompt
    assert prompt.endswith(LONG_DRAFT[-20:])
    assert LONG_DRAFT[:20] not in prompt


def test_chat_source_unknown_kind_does_not_call_client():
    client = FakeChatClient()
    assert ChatModelContentSource(client).produce(None, "", "") == templates.UNKNOWN_KIND
    assert client.prompts == []


def test_build_content_source():
    assert isinstance(build_content_source("canned"), CannedContentSource)
    client = FakeChatClient()
    chat = build_content_source(" Chat ", client=client)
    assert isinstance(chat, ChatModelContentSource)
    assert chat.client is client
    with pytest.raises(ValueError):
        build_content_source("oracle")


def test_get_client_by_name(monkeypatch):
    monkeypatch.setenv("DEEPSEEK_API_KEY", "ds-key")
    monkeypatch.setenv("MOONSHOT_API_KEY", "ms-key")
    monkeypatch.setenv("OPENAI_API_KEY", "oa-key")

    assert isinstance(get_client("deepseek"), DeepSeekModel)
    assert get_client("deepseek-reasoner").model_name == "deepseek-reasoner"
    assert isinstance(get_client("kimi-k2.5"), KimiModel)
    assert isinstance(get_client("gpt-4o"), OpenAIModel)
    with pytest.raises(ValueError):
        get_client("llama")


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)
    with pytest.raises(ValueError):
        DeepSeekModel()


def test_chat_returns_reply_text():
    model = DeepSeekModel(api_key="k")
    completions = FakeCompletions(content="Waves.")
    model.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))

    assert model.chat("Describe the sea", history=[{"role": "assistant", "content": "Hi"}]) == "Waves."
    messages = completions.calls[0]["messages"]
    assert [m["role"] for m in messages] == ["system", "assistant", "user"]
    assert messages[-1]["content"] == "Describe the sea"


def test_chat_failure_comes_back_as_error_text():
    model = DeepSeekModel(api_key="k")
    completions = FakeCompletions(error=RuntimeError("boom"))
    model.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))

    assert model.chat("hi") == "Error: boom"


class SlowChatClient(FakeChatClient):
    def chat(self, prompt, **kwargs):
        time.sleep(0.5)
        return super().chat(prompt, **kwargs)


def test_slow_chat_source_does_not_block_other_tasks():
    assistant = WritingAssistant(ChatModelContentSource(SlowChatClient()), delay=0)

    async def scenario():
        gaps = []
        done = asyncio.Event()

        async def ticker():
            last = time.monotonic()
            while not done.is_set():
                await asyncio.sleep(0.05)
                now = time.monotonic()
                gaps.append(now - last)
                last = now

        tick_task = asyncio.create_task(ticker())
        suggestion = await assistant.generate("continue", LONG_DRAFT)
        done.set()
        await tick_task
        return suggestion, gaps

    suggestion, gaps = asyncio.run(scenario())

    assert suggestion == "A fresh paragraph."
    assert len(gaps) >= 3
    assert max(gaps) < 0.3


def test_provider_defaults(monkeypatch):
    monkeypatch.setenv("OPENAI_BASE_URL", "http://localhost:8000/v1")

    kimi = KimiModel(api_key="k")
    assert kimi.model_name == "kimi-k2.5"
    assert str(kimi.client.base_url).startswith("https://api.moonshot.cn/v1")

    local = OpenAIModel(api_key="k", model_name="gpt-4o")
    assert local.model_name == "gpt-4o"
    assert str(local.client.base_url).startswith("http://localhost:8000/v1")


def test_missing_key_message_names_the_variable(monkeypatch):
    monkeypatch.delenv("MOONSHOT_API_KEY", raising=False)
    with pytest.raises(ValueError, match="MOONSHOT_API_KEY"):
        KimiModel()
