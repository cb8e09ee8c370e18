"""
Multi-step plans for instructions that look like more than one action.

A plan is requested from the model in one call, validated structurally and,
if anything is off, replaced by a one-step plan that hands the instruction to
chat.  Steps always run in index order; ``dependencies`` are shown to the user
but do not affect scheduling.
"""
from __future__ import annotations
import logging
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from .actions import Action, ChatAction, parse_action
from .console import CLIColors, Console
from .llm import LLM
from .system_context import SystemContext
from .utils import load_json

logger = logging.getLogger(__name__)

TASK_VERBS = (
    "create", "build", "implement", "develop", "setup", "configure",
    "refactor", "optimize", "fix bug", "add feature", "integrate",
    "deploy", "test", "debug", "migrate", "update",
)
CONNECTORS = (
    "and", "then", "also", "additionally", "furthermore",
    "multiple", "several", "various", "different",
)
LONG_INSTRUCTION = 50

COMPLEXITIES = ("simple", "moderate", "complex")

STEP_ICONS = {"read": "📖", "write": "✏️ ", "run": "🚀", "chat": "💬", "rollback": "↩️ "}

SYSTEM_PROMPT = """You are an expert coding assistant that creates detailed execution plans.

Given a user instruction, create a comprehensive plan with multiple steps if needed.

{environment}

Respond with a JSON object in this exact format:
{{
  "goal": "Clear description of what we're trying to achieve",
  "complexity": "simple|moderate|complex",
  "estimatedTime": "estimated completion time",
  "steps": [
    {{
      "step": 1,
      "description": "Human readable description of this step",
      "action": {{
        "type": "read|write|run|chat|rollback",
        "target": "filepath for read or write",
        "content": "file content if write action",
        "command": "shell command if run action",
        "message": "message if chat action",
        "reasoning": "why this action is needed"
      }},
      "dependencies": [previous step numbers this depends on],
      "reasoning": "why this step is necessary"
    }}
  ]
}}

Context from previous actions:
{context}

Rules:
- Break complex tasks into logical steps
- Each step should be atomic and focused
- Include dependencies between steps
- For simple tasks, create a single step
- For complex tasks, create 3-7 steps maximum
- Always include reasoning for each step
- Respond ONLY with valid JSON"""


def needs_planning(instruction: str) -> bool:
    """Cheap lexical gate: a task verb plus a connector word or a long instruction."""
    lowered = instruction.lower()
    if not any(verb in lowered for verb in TASK_VERBS):
        return False
    return any(word in lowered for word in CONNECTORS) or len(instruction) > LONG_INSTRUCTION


class Step(BaseModel):
    index: int = Field(..., ge=1)
    description: str
    action: Optional[Action] = None
    # set when the model's action for this step could not be used
    action_error: Optional[str] = None
    dependencies: list[int] = Field(default_factory=list)
    reasoning: str = ""


class ExecutionPlan(BaseModel):
    goal: str
    steps: list[Step] = Field(..., min_length=1)
    estimated_time: str = "unknown"
    complexity: Literal["simple", "moderate", "complex"] = "moderate"


class PlanError(ValueError):
    pass


def fallback_plan(instruction: str) -> ExecutionPlan:
    return ExecutionPlan(
        goal=instruction,
        complexity="simple",
        estimated_time="1-2 minutes",
        steps=[Step(
            index=1,
            description=instruction,
            action=ChatAction(message=instruction, reasoning="Fallback to chat due to planning error"),
            reasoning="Single step execution due to planning complexity",
        )],
    )


def _int_list(value: Any) -> list[int]:
    if not isinstance(value, list):
        return []
    out = []
    for v in value:
        try:
            out.append(int(v))
        except (TypeError, ValueError):
            continue
    return out


def build_plan(payload: Any) -> ExecutionPlan:
    """Validate a decoded plan reply; raises :class:`PlanError` when it is unusable."""
    if not isinstance(payload, dict):
        raise PlanError("plan is not a JSON object")
    goal = payload.get("goal")
    if not isinstance(goal, str) or not goal.strip():
        raise PlanError("plan has no goal")
    raw_steps = payload.get("steps")
    if not isinstance(raw_steps, list) or not raw_steps:
        raise PlanError("plan has no steps")

    steps: list[Step] = []
    last = 0
    for position, raw in enumerate(raw_steps, 1):
        if not isinstance(raw, dict):
            raise PlanError(f"step {position} is not a JSON object")
        try:
            index = int(raw["step"] if raw.get("step") is not None else position)
        except (TypeError, ValueError):
            raise PlanError(f"step {position} has a non-numeric index") from None
        if index <= last:
            raise PlanError(f"step indices must be increasing and >= 1 (got {index} after {last})")
        last = index

        description = str(raw.get("description") or f"Step {index}")
        parsed = parse_action(raw.get("action"), fallback_message=description)
        steps.append(Step(
            index=index,
            description=description,
            action=parsed.action,
            action_error=None if parsed.ok else parsed.detail,
            dependencies=_int_list(raw.get("dependencies")),
            reasoning=str(raw.get("reasoning") or ""),
        ))

    complexity = str(payload.get("complexity", "")).strip().lower()
    return ExecutionPlan(
        goal=goal.strip(),
        steps=steps,
        estimated_time=str(payload.get("estimatedTime") or "unknown"),
        complexity=complexity if complexity in COMPLEXITIES else "moderate",
    )


class MultiStepPlanner:
    def __init__(self, llm: LLM, system_context: SystemContext, console: Console):
        self.llm = llm
        self.system_context = system_context
        self.console = console

    def create_plan(self, instruction: str, context: str) -> ExecutionPlan:
        prompt = SYSTEM_PROMPT.format(environment=self.system_context.describe(), context=context)
        reply = self.llm.chat([
            {"role": "system", "content": prompt},
            {"role": "user", "content": instruction},
        ])
        if not reply or not reply.strip():
            logger.info("empty plan reply, using single-step plan")
            return fallback_plan(instruction)
        payload, error = load_json(reply)
        if error is not None:
            logger.info("plan reply is not JSON (%s), using single-step plan", error)
            return fallback_plan(instruction)
        try:
            return build_plan(payload)
        except PlanError as e:
            logger.info("invalid plan (%s), using single-step plan", e)
            return fallback_plan(instruction)

    def display_plan(self, plan: ExecutionPlan) -> None:
        c = self.console
        c.header(f"Execution Plan: {plan.goal}")
        c.print(f"🎯 {plan.goal}")
        c.print(f"⏱️  Estimated time: {plan.estimated_time}")
        c.print(f"📊 Complexity: {plan.complexity}")
        c.print(f"📝 Steps: {len(plan.steps)}")
        c.separator()
        for i, step in enumerate(plan.steps):
            icon = STEP_ICONS.get(step.action.kind, "⚡") if step.action else "⚠️ "
            c.print(f"{icon} Step {step.index}: {step.description}")
            if step.reasoning:
                c.print(CLIColors.dim(f"   💭 {step.reasoning}"))
            if step.dependencies:
                c.print(CLIColors.dim(f"   📋 Depends on: Step {', '.join(map(str, step.dependencies))}"))
            if step.action_error:
                c.print(CLIColors.warning(f"   ⚠️  {step.action_error}"))
            if i < len(plan.steps) - 1:
                c.print("   ↓")
        c.separator()

    def confirm_plan(self, plan: ExecutionPlan) -> bool:
        return self.console.confirm("🤔 Proceed with this plan?")
