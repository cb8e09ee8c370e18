from __future__ import annotations
import logging
from typing import Optional

from .actions import Action, ChatAction
from .backups import BackupManager
from .config import AgentConfig
from .console import CLIColors, Console
from .errors import MalformedAction
from .llm import LLM
from .memory import Memory
from .planner import IntentPlanner
from .plans import ExecutionPlan, MultiStepPlanner, needs_planning
from .system_context import SystemContext
from .tools.executor import Executor

logger = logging.getLogger(__name__)


class CodingAgent:
    """
    Runs instructions end to end: plan, confirm where needed, execute, remember.

    ``process_instruction`` never raises; failures are reported, logged and
    remembered so an interactive session can keep going.
    """

    def __init__(self, cfg: AgentConfig, llm: LLM, console: Console, backups: BackupManager):
        self.cfg = cfg
        self.console = console
        self.memory = Memory(max_entries=cfg.memory_size, context_entries=cfg.context_entries)
        system_context = SystemContext(cfg)
        self.planner = IntentPlanner(llm, system_context)
        self.multi_step_planner = MultiStepPlanner(llm, system_context, console)
        self.executor = Executor(cfg, llm, console, backups)

    def process_instruction(self, instruction: str) -> bool:
        self.console.print(f"\n🤖 {CLIColors.highlight('Processing:')} \"{instruction}\"")
        context = self.memory.context()

        if needs_planning(instruction):
            try:
                return self.execute_with_planning(instruction, context)
            except Exception as e:
                self._record_failure(instruction, None, e)
                return False

        action: Optional[Action] = None
        try:
            with self.console.thinking("Analyzing your request..."):
                action = self.planner.parse_intent(instruction, context)
            self.console.print(f"📋 Planned action: {action.kind} - {action.reasoning or 'No reasoning provided'}")
            result = self.executor.execute(action, context)
        except Exception as e:
            self._record_failure(instruction, action, e)
            return False

        self.memory.add(instruction, action, result)
        self.console.success(f"Completed: {instruction}")
        return True

    def execute_with_planning(self, instruction: str, context: str) -> bool:
        with self.console.thinking("Creating execution plan..."):
            plan = self.multi_step_planner.create_plan(instruction, context)

        self.multi_step_planner.display_plan(plan)
        if not self.multi_step_planner.confirm_plan(plan):
            self.console.info("Plan cancelled by user")
            return True
        return self.execute_plan(plan)

    def execute_plan(self, plan: ExecutionPlan) -> bool:
        # strictly in index order; step.dependencies are never consulted here
        all_ok = True
        for step in plan.steps:
            label = f"Step {step.index}: {step.description}"
            self.console.info(f"Executing {label}")
            action = step.action or ChatAction(message=step.description, reasoning=step.action_error)
            try:
                if step.action is None:
                    raise MalformedAction(step.action_error or "step has no action")
                result = self.executor.execute(step.action, self.memory.context())
            except Exception as e:
                all_ok = False
                self.memory.add(label, action, f"Error: {e}")
                self.console.error(f"Step {step.index} failed: {e}")
                if not self.console.confirm("⚠️  Step failed. Continue with remaining steps?"):
                    self.console.info("Execution stopped by user")
                    return False
                continue

            self.memory.add(label, action, result)
            self.console.success(f"Step {step.index} completed")

        self.console.success(f"Completed multi-step plan: {plan.goal}")
        return all_ok

    def _record_failure(self, instruction: str, action: Optional[Action], error: Exception) -> None:
        message = str(error) or type(error).__name__
        logger.error(f'error processing "{instruction}": {message}')
        self.console.error(f'Error processing "{instruction}": {message}')
        failed = action or ChatAction(message=instruction, reasoning="Failed attempt")
        self.memory.add(instruction, failed, message)
        self.console.print("\n🔄 Ready for next command...")
