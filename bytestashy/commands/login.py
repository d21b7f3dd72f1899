"""Login and logout commands - manage the stored API key."""

from __future__ import annotations

import os

from rich.prompt import Prompt

from bytestashy.commands.base import BaseCommand
from bytestashy.core.errors import ValidationError
from bytestashy.core.session import validate_server_url
from bytestashy.ui.console import console, print_success
from bytestashy.ui.spinners import create_spinner

API_KEY_ENV = "BYTESTASHY_API_KEY"


class LoginCommand(BaseCommand):
    """Validate an API key against a server and store it in the keyring."""

    name = "login"
    description = "Authenticate with your ByteStash server"
    usage = "login <server-url>"
    requires_session = False

    def execute(self, args: list[str]) -> bool:
        _, remaining = self.parse_flags(args)

        if remaining:
            server_url = remaining[0]
        else:
            server_url = Prompt.ask("[primary]❯[/primary] [text]ByteStash URL[/text]", console=console).strip()
        if not server_url:
            raise ValidationError("Provide the URL of your ByteStash server")
        server_url = validate_server_url(server_url)

        api_key = os.environ.get(API_KEY_ENV) or Prompt.ask(
            "[primary]❯[/primary] [text]API key[/text]",
            console=console,
            password=True,
        )

        with create_spinner(f"Checking API key against {server_url}...", style="loading"):
            self.session.login(server_url, api_key)

        print_success(
            f"Logged in to {self.session.config.server_url}. API key saved to the keyring.",
            title="Login",
        )
        return True


class LogoutCommand(BaseCommand):
    """Remove the API key of the configured server from the keyring."""

    name = "logout"
    description = "Forget the stored API key"
    usage = "logout"
    requires_session = False

    def execute(self, args: list[str]) -> bool:
        self.session.logout()
        print_success("API key removed from the keyring.", title="Logout")
        return True
