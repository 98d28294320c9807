"""Tests for Postmark-side template management tools."""

from unittest.mock import AsyncMock

import pytest

from models import ErrorKind, PostmarkMcpError, TemplateSummary
from tools import ToolRegistry


def _echo(**overrides: object) -> dict:
    """Template record as Postmark returns it after create/edit."""
    record = {"TemplateId": 42, "Name": "Welcome", "Subject": "Hi", "Alias": "welcome", "Active": True}
    record.update(overrides)
    return record


class TestListTemplates:

    @pytest.mark.asyncio
    async def test_renders_each_template(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.get_templates.return_value = [
            TemplateSummary(template_id=1, name="Welcome", alias="welcome", subject="Hello"),
            TemplateSummary(template_id=2, name="Receipt"),
        ]

        text = await registry.dispatch("listTemplates", {})

        assert text.startswith("Found 2 templates:\n\n")
        assert "• **Welcome**\n  - ID: 1\n  - Alias: welcome\n  - Subject: Hello" in text
        assert "• **Receipt**\n  - ID: 2\n  - Alias: none\n  - Subject: none" in text

    @pytest.mark.asyncio
    async def test_rejects_arguments(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        with pytest.raises(PostmarkMcpError) as exc_info:
            await registry.dispatch("listTemplates", {"count": 5})

        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        mock_client.get_templates.assert_not_called()


class TestCreateTemplate:

    @pytest.mark.asyncio
    async def test_creates_with_supplied_fields(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.create_template.return_value = _echo()

        text = await registry.dispatch("createTemplate", {
            "name": "Welcome", "subject": "Hi", "htmlBody": "<p>Hi</p>", "alias": "welcome",
        })

        mock_client.create_template.assert_awaited_once_with(
            {"Name": "Welcome", "Subject": "Hi", "HtmlBody": "<p>Hi</p>", "Alias": "welcome"}
        )
        assert text.startswith("Template created successfully!")
        assert "Template ID: 42" in text
        assert "Alias: welcome" in text
        assert "Active: Yes" in text

    @pytest.mark.asyncio
    async def test_requires_a_body(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        with pytest.raises(PostmarkMcpError) as exc_info:
            await registry.dispatch("createTemplate", {"name": "Welcome", "subject": "Hi"})

        assert "Either htmlBody or textBody must be provided" in exc_info.value.message
        mock_client.create_template.assert_not_called()

    @pytest.mark.asyncio
    async def test_inactive_without_alias(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.create_template.return_value = _echo(Alias=None, Active=False)

        text = await registry.dispatch("createTemplate", {"name": "Welcome", "subject": "Hi", "textBody": "Hi"})

        assert "Alias: none" in text
        assert "Active: No" in text


class TestUpdateTemplate:

    @pytest.mark.asyncio
    async def test_sends_only_supplied_fields(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.edit_template.return_value = _echo(Subject="New")

        text = await registry.dispatch("updateTemplate", {"templateIdOrAlias": "welcome", "subject": "New"})

        mock_client.edit_template.assert_awaited_once_with("welcome", {"Subject": "New"})
        assert text.startswith("Template updated successfully!")
        assert "Subject: New" in text

    @pytest.mark.asyncio
    async def test_empty_string_counts_as_a_change(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.edit_template.return_value = _echo(Alias=None)

        await registry.dispatch("updateTemplate", {"templateIdOrAlias": "42", "alias": ""})

        mock_client.edit_template.assert_awaited_once_with("42", {"Alias": ""})

    @pytest.mark.asyncio
    async def test_requires_a_change(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        with pytest.raises(PostmarkMcpError) as exc_info:
            await registry.dispatch("updateTemplate", {"templateIdOrAlias": "welcome"})

        assert "At least one field must be provided to update" in exc_info.value.message
        mock_client.edit_template.assert_not_called()


class TestDeleteTemplate:

    @pytest.mark.asyncio
    async def test_reports_status_and_audit_note(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.delete_template.return_value = {"ErrorCode": 0, "Message": "Template 42 removed."}

        text = await registry.dispatch("deleteTemplate", {"templateIdOrAlias": "42"})

        mock_client.delete_template.assert_awaited_once_with("42")
        assert "Template ID/Alias: 42" in text
        assert "Status: Template 42 removed." in text
        assert text.endswith("Note: This action has been logged for auditing purposes.")

    @pytest.mark.asyncio
    async def test_status_defaults_to_deleted(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.delete_template.return_value = {}

        text = await registry.dispatch("deleteTemplate", {"templateIdOrAlias": "welcome"})

        assert "Status: Deleted" in text

    @pytest.mark.asyncio
    async def test_not_found_propagates(self, registry: ToolRegistry, mock_client: AsyncMock) -> None:
        mock_client.delete_template.side_effect = PostmarkMcpError(
            ErrorKind.PROVIDER_ERROR, "Postmark API error 422: 1101 - Template not found",
            status=422, error_code=1101,
        )

        with pytest.raises(PostmarkMcpError) as exc_info:
            await registry.dispatch("deleteTemplate", {"templateIdOrAlias": "missing"})

        assert exc_info.value.error_code == 1101
