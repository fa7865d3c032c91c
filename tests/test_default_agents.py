"""
Тесты для стандартного набора агентов и агентов с фиксированным ответом.
"""

import pytest

pytestmark = pytest.mark.anyio

from assistant_service.agents import StaticReplyAgent, create_default_agents
from assistant_service.agents.general import (
    EXECUTOR_REPLY,
    PLANNER_REPLY,
    RESEARCHER_REPLY,
    create_executor_agent,
    create_planner_agent,
    create_researcher_agent,
)
from assistant_service.core import AgentContext


class TestDefaultAgents:
    def test_order_and_visibility(self):
        agents = create_default_agents()

        assert [agent.id for agent in agents] == ["todo", "finance", "planner", "researcher", "executor"]
        assert [agent.visible for agent in agents] == [True, True, False, False, False]

    def test_descriptions(self):
        descriptions = {agent.id: agent.description for agent in create_default_agents()}

        assert descriptions["todo"] == "Connects to ClickUp MCP, summarizes tasks, and proposes help."
        assert descriptions["finance"] == "Connects to Flowtly to summarize financial metrics."

    def test_summarizer_passed_to_finance(self):
        marker = object()
        finance = create_default_agents(summarizer=marker)[1]

        assert finance.summarizer is marker


class TestStaticReplyAgents:
    @pytest.mark.parametrize(
        "factory,text,reply",
        [
            (create_planner_agent, "outline the launch", PLANNER_REPLY),
            (create_researcher_agent, "verify the numbers", RESEARCHER_REPLY),
            (create_executor_agent, "anything at all", EXECUTOR_REPLY),
        ],
    )
    async def test_fixed_reply(self, factory, text, reply):
        agent = factory()
        context = AgentContext(input=text)

        assert agent.can_handle(context) is True
        result = await agent.handle(context)
        assert result.reply == reply
        assert result.metadata == {"input": text}

    def test_planner_does_not_match_other_text(self):
        assert create_planner_agent().can_handle(AgentContext(input="hello there")) is False

    def test_executor_matches_everything(self):
        assert create_executor_agent().can_handle(AgentContext(input="?")) is True

    def test_custom_agent_visible(self):
        agent = StaticReplyAgent("faq", "Answers FAQ", "See the FAQ.", pattern=r"faq", visible=True)

        assert agent.visible is True
        assert agent.can_handle(AgentContext(input="FAQ please")) is True
