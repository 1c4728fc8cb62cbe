"""ReAct loop: reason, pick one action, observe, repeat."""

from __future__ import annotations

import logging
from typing import Protocol

from mini_agent.agents.action_parser import parse_action
from mini_agent.agents.dispatcher import ToolDispatcher
from mini_agent.agents.fallback import synthesize_fallback
from mini_agent.models.agent_schemas import Action, AgentResult, RunConfig, RunState, Step
from mini_agent.prompts.builder import action_prompt, final_prompt, reasoning_prompt
from mini_agent.services.llm_service import LLMService
from mini_agent.services.rate_limiter import RateLimitedCaller
from mini_agent.tools import ToolRegistry

logger = logging.getLogger(__name__)


class StepCallback(Protocol):
    def on_step_start(self, step: int, max_steps: int) -> None: ...
    def on_thinking(self, text: str) -> None: ...
    def on_action(self, action: Action) -> None: ...
    def on_observation(self, step: Step) -> None: ...
    def on_finish(self, result: AgentResult) -> None: ...


class NullCallback:
    def on_step_start(self, step: int, max_steps: int) -> None: ...
    def on_thinking(self, text: str) -> None: ...
    def on_action(self, action: Action) -> None: ...
    def on_observation(self, step: Step) -> None: ...
    def on_finish(self, result: AgentResult) -> None: ...


class ReactAgent:
    """Drives one request through the RUNNING -> DONE | FAILED state machine.

    Every model call goes through ``caller`` so that the throttling state is
    shared with anything else using the same limiter. ``run`` always returns
    text: the synthesized answer on DONE, the fallback summary on FAILED.
    """

    def __init__(
        self,
        llm: LLMService,
        caller: RateLimitedCaller,
        registry: ToolRegistry,
        config: RunConfig | None = None,
        callback: StepCallback | None = None,
    ) -> None:
        self.llm = llm
        self.caller = caller
        self.registry = registry
        self.dispatcher = ToolDispatcher(registry)
        self.config = config or RunConfig()
        self.cb: StepCallback = callback or NullCallback()
        self.state = RunState.RUNNING
        self._llm_calls = 0
        self._tool_calls = 0

    async def _ask(self, prompt: str) -> str:
        self._llm_calls += 1
        return await self.caller.call(lambda: self.llm.generate(prompt))

    def _transition(self, state: RunState) -> None:
        logger.info("Run state %s -> %s", self.state.value, state.value)
        self.state = state

    async def _run_steps(self, user_request: str, history: list[Step]) -> None:
        tools = self.registry.describe()
        max_steps = self.config.max_steps

        while self.state is RunState.RUNNING and len(history) < max_steps:
            number = len(history) + 1
            self.cb.on_step_start(number, max_steps)
            logger.info("Step %d/%d", number, max_steps)

            thought = await self._ask(reasoning_prompt(user_request, history, tools))
            self.cb.on_thinking(thought)

            action = parse_action(await self._ask(action_prompt(thought)))
            self.cb.on_action(action)
            logger.info("Action: %s(%r)", action.kind.value, action.argument)

            dispatch = await self.dispatcher.dispatch(action)
            if dispatch.tool_called:
                self._tool_calls += 1

            step = Step(
                number=number,
                thought=thought,
                action=action.kind,
                action_input=action.argument,
                observation=dispatch.observation,
            )
            history.append(step)
            self.cb.on_observation(step)

            if dispatch.terminal:
                self._transition(RunState.DONE)

        if self.state is RunState.RUNNING:
            logger.info("Step budget (%d) exhausted, synthesizing from partial history", max_steps)
            self._transition(RunState.DONE)

    async def run(self, user_request: str) -> AgentResult:
        self.state = RunState.RUNNING
        self._llm_calls = 0
        self._tool_calls = 0
        history: list[Step] = []
        error: str | None = None
        output = ""

        logger.info("Starting ReAct run: %s", user_request[:80])
        try:
            await self._run_steps(user_request, history)
        except Exception as e:
            logger.exception("ReAct run failed after %d step(s)", len(history))
            error = str(e)
            self._transition(RunState.FAILED)

        if self.state is RunState.DONE:
            try:
                output = await self._ask(final_prompt(user_request, history))
            except Exception as e:
                logger.exception("Final synthesis failed")
                error = str(e)
                self._transition(RunState.FAILED)

        if self.state is RunState.FAILED:
            output = synthesize_fallback(history)

        result = AgentResult(
            output=output,
            state=self.state,
            steps=list(history),
            llm_calls=self._llm_calls,
            tool_calls=self._tool_calls,
            error=error,
        )
        self.cb.on_finish(result)
        return result
