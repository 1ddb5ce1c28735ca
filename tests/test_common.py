import pytest

from idskit.common import (
    ErrorCode,
    LogLevel,
    ProtocolLayer,
    RuleAction,
    RuleDirection,
)


@pytest.mark.parametrize(
    "value, member",
    [
        (0, ErrorCode.SUCCESS),
        (101, ErrorCode.CONFIG_FILE_NOT_FOUND),
        (200, ErrorCode.PERMISSION_DENIED),
        (402, ErrorCode.RULE_FILE_NOT_FOUND),
        (603, ErrorCode.INTERNAL_ERROR),
    ],
)
def test_error_code_lookup_by_value(value, member):
    assert ErrorCode(value) is member


def test_error_code_unknown_value_raises():
    with pytest.raises(ValueError):
        ErrorCode(999)


def test_error_code_values_unique_and_round_trip():
    values = [member.value for member in ErrorCode]
    assert len(values) == len(set(values))
    for member in ErrorCode:
        assert ErrorCode(member.value) is member


@pytest.mark.parametrize(
    "value, member",
    [
        (0, LogLevel.LOG_DEBUG),
        (1, LogLevel.LOG_INFO),
        (2, LogLevel.LOG_WARNING),
        (3, LogLevel.LOG_ERROR),
        (4, LogLevel.LOG_ALERT),
    ],
)
def test_log_levels_are_ordered_by_severity(value, member):
    assert LogLevel(value) is member
    levels = list(LogLevel)
    assert levels == sorted(levels)
    assert LogLevel(0) < LogLevel(2) < LogLevel(4)


def test_protocol_layers_follow_model_order():
    assert [layer.value for layer in ProtocolLayer] == [1, 2, 3, 4]
    assert ProtocolLayer(3) is ProtocolLayer.TRANSPORT_LAYER


def test_rule_action_and_direction_members():
    assert [a.name for a in RuleAction] == ["ALERT", "LOG", "DROP", "PASS", "REJECT"]
    assert RuleAction(RuleAction.REJECT.value) is RuleAction.REJECT
    assert RuleDirection(RuleDirection.REVERSE.value) is RuleDirection.REVERSE
    assert len(set(RuleDirection)) == 3