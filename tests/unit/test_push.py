"""Tests for simulateTemplatePush and executeTemplatePush."""

from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from models import ErrorKind, PostmarkMcpError, PushedTemplate, PushResult
from tools import ToolContext, ToolRegistry

PUSH_ARGS = {"sourceServerID": "111", "destinationServerID": "222"}

RESULT = PushResult(
    total_count=2,
    templates=[
        PushedTemplate(name="Welcome", action="Create", alias="welcome", template_id=None),
        PushedTemplate(name="Receipt", action="Edit", alias=None, template_id=77, template_type="Layout"),
    ],
)


def _body(text: str) -> str:
    """Everything except the first line and the final note."""
    return "\n".join(text.splitlines()[1:-1])


class TestSimulateTemplatePush:

    @pytest.mark.asyncio
    async def test_does_not_perform_changes(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.push_templates.return_value = RESULT

        text = await registry.dispatch("simulateTemplatePush", PUSH_ARGS)

        mock_client.push_templates.assert_awaited_once_with("111", "222", perform_changes=False)
        assert text.startswith("Template Push Simulation Results")
        assert "Source Server ID: 111" in text
        assert "Destination Server ID: 222" in text
        assert "Total Templates Affected: 2" in text
        assert "• **Welcome** (welcome)\n  - Action: Create\n  - Type: Standard\n  - Template ID: N/A" in text
        assert "• **Receipt** (no alias)\n  - Action: Edit\n  - Type: Layout\n  - Template ID: 77" in text
        assert text.endswith("Note: This was a simulation only. No changes were made.")

    @pytest.mark.asyncio
    async def test_nothing_to_push(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.push_templates.return_value = PushResult(total_count=0)

        text = await registry.dispatch("simulateTemplatePush", PUSH_ARGS)

        assert "Total Templates Affected: 0" in text
        assert "No templates would be affected." in text

    @pytest.mark.asyncio
    async def test_server_ids_required(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        with pytest.raises(PostmarkMcpError) as exc_info:
            await registry.dispatch("simulateTemplatePush", {"sourceServerID": "111"})

        assert "destinationServerID" in exc_info.value.message
        mock_client.push_templates.assert_not_called()


class TestExecuteTemplatePush:

    @pytest.mark.asyncio
    async def test_performs_changes(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.push_templates.return_value = RESULT

        text = await registry.dispatch("executeTemplatePush", PUSH_ARGS)

        mock_client.push_templates.assert_awaited_once_with("111", "222", perform_changes=True)
        assert text.startswith("Template Push Execution Results")
        assert "Total Templates Processed: 2" in text
        assert text.endswith("Note: Changes have been applied to the destination server.")

    @pytest.mark.asyncio
    async def test_lists_same_templates_as_simulation(
        self, registry: ToolRegistry, mock_client: AsyncMock,
    ) -> None:
        mock_client.push_templates.return_value = RESULT

        simulated = await registry.dispatch("simulateTemplatePush", PUSH_ARGS)
        executed = await registry.dispatch("executeTemplatePush", PUSH_ARGS)

        listing = simulated.split("affected:\n\n", 1)[1].rsplit("\n\nNote:", 1)[0]
        assert listing in executed
        assert _body(simulated) != _body(executed)

    @pytest.mark.asyncio
    async def test_nothing_processed(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.push_templates.return_value = PushResult(total_count=0)

        text = await registry.dispatch("executeTemplatePush", PUSH_ARGS)

        assert "No templates were processed." in text


class TestAccountToken:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool", ["simulateTemplatePush", "executeTemplatePush"])
    async def test_missing_account_token(self, registry: ToolRegistry, mock_client: AsyncMock, tool: str) -> None:
        settings = replace(registry.context.settings, account_token=None)
        no_account = ToolRegistry(ToolContext(settings=settings, client=mock_client))

        with pytest.raises(PostmarkMcpError) as exc_info:
            await no_account.dispatch(tool, PUSH_ARGS)

        assert exc_info.value.kind == ErrorKind.MISSING_CREDENTIAL
        assert "POSTMARK_ACCOUNT_TOKEN" in exc_info.value.message
        mock_client.push_templates.assert_not_called()
