"""
Chat Client Main Entry Point

Console front end that drives a chat connection from standard input.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt

from chat_core.client.network import Connection
from chat_core.client.ui import DisplayManager
from chat_core.shared.config import ClientConfig, ConfigurationLoader
from chat_core.shared.constants import QUIT_COMMAND
from chat_core.shared.exceptions import ChatCoreError, ConfigurationError, EncodingError
from chat_core.shared.logging_config import configure_from_env

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Line-based chat client")
    parser.add_argument("--config", help="Path to a JSON or YAML configuration file")
    parser.add_argument("--host", help="Chat host to connect to")
    parser.add_argument("--port", type=int, help="Chat host port")
    parser.add_argument("--username", help="Username to join with")
    parser.add_argument("--log-file", help="Write logs to this file")
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace, console: Console) -> ClientConfig:
    """
    Merge file, environment, command line and prompted settings.

    Args:
        args: Parsed command line arguments.
        console: Console used for prompts.

    Returns:
        Validated client configuration.
    """
    config = ConfigurationLoader.load_client_config(args.config)

    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.username:
        config.username = args.username

    if not args.host and not args.port:
        config.host = Prompt.ask("[cyan]Enter Server Host[/cyan]", default=config.host, console=console)
        config.port = IntPrompt.ask("[cyan]Enter Server Port[/cyan]", default=config.port, console=console)
    while not config.username:
        config.username = Prompt.ask("[cyan]Enter your Username[/cyan]", console=console).strip()

    config.validate()
    return config


def run_session(connection: Connection, display: DisplayManager, username: str) -> None:
    """
    Join the chat and forward standard input lines until quit or EOF.

    Args:
        connection: An open connection.
        display: Display used for local notices.
        username: Name to join with.
    """
    connection.join(username)
    for line in sys.stdin:
        text = line.rstrip("\r\n")
        if text == QUIT_COMMAND or not connection.is_open():
            break
        if not text:
            continue
        try:
            connection.send(text)
        except EncodingError as e:
            display.add_system_message(f"=> Not sent: {e}", "red")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the chat client."""
    console = Console()
    args = parse_args(argv)

    try:
        config = resolve_config(args, console)
        configure_from_env(level=config.log_level, log_file=args.log_file)
    except ConfigurationError as e:
        console.print(f"[bold red]Invalid configuration: {e}[/bold red]")
        sys.exit(1)
    except (KeyboardInterrupt, EOFError):
        console.print("\n[bold blue]Client startup cancelled.[/bold blue]")
        sys.exit(0)

    console.print(Panel(f"[bold cyan]Chatting on {config.host}:{config.port} as {config.username}[/bold cyan]",
                        border_style="cyan"))

    display = DisplayManager(console)
    connection = Connection(config.to_connection_config(), listener=display)

    if not connection.open():
        console.print(f"[bold red]Failed to connect to {config.host}:{config.port}[/bold red]")
        sys.exit(1)

    try:
        run_session(connection, display, config.username)
    except KeyboardInterrupt:
        logger.info("Client interrupted by user")
    except ChatCoreError as e:
        logger.error(f"Client error: {e}")
    finally:
        connection.close()


if __name__ == "__main__":
    main()
