"""
tests/cli/test_cli_prompts.py - cli/ui/prompts.py 테스트
"""

from unittest.mock import patch

from awsnav.cli.ui import prompts
from awsnav.core.resource.catalog import EC2_INSTANCES
from awsnav.core.resource.types import ResourceRow


def _action(action_id):
    return EC2_INSTANCES.get_action(action_id)


class TestNeedsConfirmation:
    """needs_confirmation 테스트"""

    def test_destructive_and_confirm_flags(self):
        assert prompts.needs_confirmation(_action("terminate"))
        assert prompts.needs_confirmation(_action("stop"))
        assert not prompts.needs_confirmation(_action("start"))


class TestConfirmAction:
    """confirm_action 테스트"""

    def test_destructive_requires_typed_key(self):
        with patch.object(prompts.questionary, "text") as mock_text:
            mock_text.return_value.ask.return_value = " i-1 "
            assert prompts.confirm_action(_action("terminate"), "i-1")

            mock_text.return_value.ask.return_value = "yes"
            assert not prompts.confirm_action(_action("terminate"), "i-1")

    def test_destructive_cancelled(self):
        with patch.object(prompts.questionary, "text") as mock_text:
            mock_text.return_value.ask.return_value = None
            assert not prompts.confirm_action(_action("terminate"), "i-1")

    def test_confirm_defaults_to_no(self):
        with patch.object(prompts.questionary, "confirm") as mock_confirm:
            mock_confirm.return_value.ask.return_value = None

            assert not prompts.confirm_action(_action("stop"), "i-1")
            assert mock_confirm.call_args.kwargs["default"] is False


class TestSelectPrompts:
    """선택 프롬프트 테스트"""

    def test_select_row_values(self):
        rows = [
            ResourceRow(kind="ec2-instances", key="i-1", columns={"Name": "web", "Instance ID": "i-1"}, raw={}),
            ResourceRow(kind="ec2-instances", key="", columns={}, raw={}),
        ]
        with patch.object(prompts.questionary, "select") as mock_select:
            mock_select.return_value.ask.return_value = "i-1"

            assert prompts.select_row(EC2_INSTANCES, rows) == "i-1"

        choices = mock_select.call_args.kwargs["choices"]
        values = [c.value for c in choices if not isinstance(c, prompts.questionary.Separator)]
        assert values == [prompts.REFRESH, prompts.FILTER, prompts.BACK, "i-1"]

    def test_select_action_marks_destructive(self):
        with patch.object(prompts.questionary, "select") as mock_select:
            prompts.select_action(EC2_INSTANCES.actions)

        titles = [c.title for c in mock_select.call_args.kwargs["choices"]]
        assert "Terminate (파괴적)" in titles
        assert titles[0] == "상세 보기"

    def test_select_region_recent_first(self):
        with patch.object(prompts.questionary, "select") as mock_select:
            prompts.select_region(["ap-northeast-2", "us-east-1", "us-west-2"], ["us-west-2", "gone-1"], "us-east-1")

        choices = mock_select.call_args.kwargs["choices"]
        values = [c.value for c in choices if not isinstance(c, prompts.questionary.Separator)]
        assert values == ["us-west-2", "ap-northeast-2", "us-east-1"]
        assert mock_select.call_args.kwargs["default"] == "us-east-1"
