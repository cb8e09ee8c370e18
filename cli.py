#!/usr/bin/env python3
"""
Coding Agent CLI
Turns natural-language instructions into file, shell and chat actions.
"""

import argparse
import logging
import sys
from typing import Optional

from coding_agent.agent import CodingAgent
from coding_agent.backups import BackupManager
from coding_agent.config import AgentConfig
from coding_agent.console import CLIColors, Console
from coding_agent.llm import LLM

PROMPT = "\n🔵 my-agent> "

class AgentCLI:
    """Main CLI class for the coding agent"""

    def __init__(self, config: AgentConfig, console: Optional[Console] = None,
                 llm: Optional[LLM] = None, backups: Optional[BackupManager] = None):
        self.config = config
        self.console = console or Console()
        self.backups = backups or BackupManager(config.max_backups)
        self.agent = CodingAgent(config, llm or LLM(config), self.console, self.backups)

    def run_once(self, instruction: str) -> bool:
        return self.agent.process_instruction(instruction)

    def interactive_mode(self):
        """Start interactive CLI mode"""
        self._show_welcome()
        while True:
            try:
                user_input = self.console.ask(CLIColors.highlight(PROMPT))
            except (KeyboardInterrupt, EOFError):
                self.console.print("\n" + CLIColors.success("👋 Goodbye!"))
                break

            if not user_input:
                continue
            if user_input.lower() in ("exit", "quit", "q"):
                self.console.print(CLIColors.success("👋 Goodbye!"))
                break
            if user_input.startswith("/"):
                self._handle_builtin(user_input)
                continue

            try:
                self.agent.process_instruction(user_input)
            except KeyboardInterrupt:
                self.console.warning("Interrupted")

    def _handle_builtin(self, command: str):
        name = command.split()[0].lower()
        if name == "/help":
            self._show_help()
        elif name == "/clear":
            self.console.print("\033[2J\033[H")
        elif name == "/memory":
            entries = self.agent.memory.entries
            if not entries:
                self.console.info("No conversation history yet.")
            for entry in entries:
                self.console.print(f"[{entry.timestamp:%H:%M:%S}] {entry.instruction}")
                self.console.print(CLIColors.dim(f"    {entry.action.kind} -> {entry.result[:100]}"))
        else:
            self.console.error(f"Unknown command: {name}")
            self.console.info("💡 Type /help for available commands.")

    def _show_welcome(self):
        self.console.print(CLIColors.highlight("🤖 Coding Agent CLI - Interactive Mode"))
        self.console.print(CLIColors.info(f"📁 Project Root: {self.config.project_root}"))
        self.console.print(CLIColors.info('💡 Type your instructions or "exit" to quit'))
        self.console.print(CLIColors.info('📝 Example: "read package.json" or "create utils.py with hello world"'))
        self.console.separator("─", 50)

    def _show_help(self):
        help_text = """
🔧 Available Commands:

  <instruction>   - Natural language instruction, e.g. "create a Python function"
  /help           - Show this help message
  /memory         - Show recent conversation history
  /clear          - Clear the screen
  exit            - Quit the application
"""
        self.console.print(CLIColors.info(help_text))

def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser"""
    parser = argparse.ArgumentParser(
        prog="my-agent",
        description="Coding Agent CLI - execute natural language coding instructions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              start interactive mode
  %(prog)s "read package.json"
  %(prog)s "create utils.py with a hello world function and then run it"
""",
    )
    parser.add_argument("instruction", nargs="?", help="Natural language instruction for the AI agent")
    parser.add_argument("--project-root", "-p", type=str,
                        help="Project root directory (default: current directory)")
    parser.add_argument("--model", "-m", type=str, help="Model name to request from the API")
    parser.add_argument("--verbose", "-v", action="store_true", help="Run with verbose logging")
    return parser

def main(argv: Optional[list[str]] = None):
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = AgentConfig.from_env(args.project_root, model=args.model)
    except Exception as e:
        print(CLIColors.error(f"❌ Failed to load configuration: {str(e)}"))
        sys.exit(1)

    if not config.api_key:
        print(CLIColors.error("❌ OPENROUTER_API_KEY not found in environment"))
        print(CLIColors.info("💡 Create a .env file with: OPENROUTER_API_KEY=your_key_here"))
        sys.exit(1)

    try:
        cli = AgentCLI(config)
    except Exception as e:
        print(CLIColors.error(f"❌ Failed to initialize CLI: {str(e)}"))
        sys.exit(1)

    if args.instruction is None:
        cli.interactive_mode()
        sys.exit(0)

    success = cli.run_once(args.instruction)
    sys.exit(0 if success else 1)

if __name__ == "__main__":
    main()
