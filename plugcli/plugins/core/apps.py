"""Apps listing, paginated from the API."""

from __future__ import annotations

import json
from typing import Any

from ...commands.command import Command
from ...commands.models import CommandMetadata, CommandOption, NormalizedOptions
from ...commands.namespace import Namespace
from ...httpclient import APIClient, is_paged_response
from ...models import OptionType
from ...paginator import Paginator

__all__ = ["AppClient", "AppsListCommand", "AppsNamespace", "is_app_list_response"]


def is_app_list_response(body: Any) -> bool:  # noqa: ANN401
    """Tell whether `body` is a page of apps."""
    return is_paged_response(body) and all(isinstance(app, dict) and "id" in app and "name" in app for app in body["data"])


class AppClient:
    """The apps API."""

    def __init__(self, client: APIClient, page_size: int) -> None:
        self.client = client
        self.page_size = page_size

    def list(self) -> Paginator[dict[str, Any]]:
        """Iterate over the pages of apps."""
        return self.client.paginate(lambda: self.client.make("GET", "/apps"), is_app_list_response, self.page_size)


class AppsListCommand(Command):
    """List the apps of the account."""

    metadata = CommandMetadata(
        name="list",
        description="List your apps",
        options=(CommandOption("json", "Print the apps in JSON", OptionType.BOOLEAN),),
    )

    async def run(self, inputs: list[str], options: NormalizedOptions) -> None:
        apps_client = AppClient(self.env.client, self.env.settings.get_int("page_size"))
        apps: list[dict[str, Any]] = []
        async for page in apps_client.list():
            apps.extend(page["data"])

        if options["json"]:
            print(json.dumps(apps))
        elif not apps:
            print("No apps found")
        else:
            for app in apps:
                print(f"{app['id']:12s} {app['name']:30s} {app.get('slug', '')}")


class AppsNamespace(Namespace):
    """App management commands."""

    name = "apps"
    description = "Apps functionality"

    def __init__(self) -> None:
        super().__init__(commands={"list": AppsListCommand, "ls": "list"})
