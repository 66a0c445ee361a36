"""Run configuration parsed from ``-name=value`` command-line options.

Options that are recognised are consumed. Everything else, including the
program name, is returned unchanged so that it can be passed on to the
runtime.
"""

from __future__ import annotations

import re
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

GRAPH_PARTITION_NUM = 64
IC_QUERY_NUM = 12
CQ_NUM = 6
E1_TOTAL_EXEC_ROUNDS = 128

SUPPORTED_DATASETS = ("ldbc1", "ldbc100")

_UNSIGNED_MAX = 0xFFFFFFFF
_LEADING_NUMBER = re.compile(r"\s*([+-]?)(\d+)")


class SchedulePolicy(Enum):
    """Order in which continuous-query work is scheduled."""

    FIFO = "fifo"
    DFS = "dfs"
    BFS = "bfs"


class BackgroundQueryType(Enum):
    """Size of the background queries in the isolation experiment."""

    SMALL = "small"
    LARGE = "large"


class ConfigError(ValueError):
    """A command-line option has a value that cannot be used."""


@dataclass
class Config:
    """All tunable settings, with their defaults."""

    # graph storage
    dataset: str = "ldbc1"

    # query
    batch_size: int = 64
    param_num: int = 10
    exec_epoch: int = 3

    # runner environments
    at_ic: bool = False
    at_cq: bool = False
    at_e1: bool = False
    at_e3: bool = False
    at_e4: bool = False
    at_e5: bool = False

    # continuous queries
    cq_max_si: int = 10
    cq_limit_n: int = 10
    cq_using_limit_cancel: bool = True
    cq_using_branch_cancel: bool = True
    cq_query_policy: SchedulePolicy = SchedulePolicy.FIFO
    cq_loop_policy: SchedulePolicy = SchedulePolicy.FIFO
    cq_loop_instance_policy: SchedulePolicy = SchedulePolicy.FIFO
    cq_where_policy: SchedulePolicy = SchedulePolicy.FIFO
    cq_where_branch_policy: SchedulePolicy = SchedulePolicy.FIFO

    # E1: scalability with concurrent queries
    e1_concurrency: int = 1

    # E3: mixed big and small concurrent queries
    e3_concurrency: int = 32
    e3_rounds: int = 5
    e3_param_start_offset: int = 0

    # E4: foreground query under background load
    e4_bg_query_num: int = 0
    e4_fg_exec_rounds: int = 51
    e4_bg_query_type: BackgroundQueryType = BackgroundQueryType.SMALL

    # E5: load balancing
    e5_query_submit_interval_in_ms: int = 270
    e5_total_exec_rounds: int = 90
    e5_balance_round: int = 28
    e5_query_submit_interval_2_in_ms: int = 210
    e5_change_input_rate_round: int = 64


def _parse_unsigned(text: str) -> int:
    """Read a leading unsigned number, ignoring any trailing characters."""
    match = _LEADING_NUMBER.match(text)
    if match is None:
        raise ValueError(f"no number in {text!r}")
    sign, digits = match.groups()
    value = int(digits)
    if sign == "-" and value != 0:
        raise ValueError("value must not be negative")
    if value > _UNSIGNED_MAX:
        raise ValueError("value out of range")
    return value


def _param_num_in_range(value: int) -> None:
    if not 0 < value <= 50:
        raise ValueError("param-num must be between 1 and 50")


def _e3_rounds_in_range(value: int) -> None:
    if value > 20:
        raise ConfigError("Error configuration! e3-exec-rounds should be no more than 20!")


_Check = Callable[[int], None]

# option prefix -> (config field, name used in messages, extra check)
_NUMERIC_OPTIONS: dict[str, tuple[str, str, _Check | None]] = {
    "-batch-size=": ("batch_size", "batch-size", None),
    "-param-num=": ("param_num", "param-num", _param_num_in_range),
    "-exec-epoch=": ("exec_epoch", "exec-epoch", None),
    "-cq-max-si=": ("cq_max_si", "cq-max-si", None),
    "-cq-limit-n=": ("cq_limit_n", "cq-limit-n", None),
    "-e1-concurrency=": ("e1_concurrency", "e1-concurrency", None),
    "-e3-concurrency=": ("e3_concurrency", "e3-concurrency", None),
    "-e3-exec-rounds=": ("e3_rounds", "e3-exec-rounds", _e3_rounds_in_range),
    "-e3-param-start-offset=": ("e3_param_start_offset", "-e3-param-start-offset=", None),
    "-e4-foreground-exec-times=": ("e4_fg_exec_rounds", "e4-foreground-exec-times", None),
    "-e4-background-num=": ("e4_bg_query_num", "e4-background-num", None),
    "-e5-submit-interval-ms=": ("e5_query_submit_interval_in_ms", "e5-submit-interval-ms", None),
    "-e5-exec-rounds=": ("e5_total_exec_rounds", "e5-exec-rounds", None),
    "-e5-balance-round=": ("e5_balance_round", "e5-balance-round", None),
    "-e5-stage2-submit-interval-ms=": (
        "e5_query_submit_interval_2_in_ms",
        "e5-stage2-submit-interval-ms",
        None,
    ),
    "-e5-change-input-rate-round=": (
        "e5_change_input_rate_round",
        "e5-change-input-rate-round",
        None,
    ),
}

_POLICY_OPTIONS: dict[str, str] = {
    "-cq-query-policy=": "cq_query_policy",
    "-cq-loop-policy=": "cq_loop_policy",
    "-cq-loop-instance-policy=": "cq_loop_instance_policy",
    "-cq-where-policy=": "cq_where_policy",
    "-cq-where-branch-policy=": "cq_where_branch_policy",
}

_SWITCH_OPTIONS: dict[str, str] = {
    "--cq-close-limit-cancel": "cq_using_limit_cancel",
    "--cq-close-branch-cancel": "cq_using_branch_cancel",
}


def _apply_numeric(config: Config, prefix: str, value: str) -> None:
    name, label, check = _NUMERIC_OPTIONS[prefix]
    try:
        number = _parse_unsigned(value)
        if check is not None:
            check(number)
    except ConfigError:
        raise
    except ValueError as exc:
        raise ConfigError(f"Error configuration with {label}!") from exc
    setattr(config, name, number)


def _apply_policy(config: Config, prefix: str, value: str) -> None:
    try:
        policy = SchedulePolicy(value.lower())
    except ValueError as exc:
        raise ConfigError(
            'Unsupported policy type! Please use "FIFO", "DFS" or "BFS"!'
        ) from exc
    setattr(config, _POLICY_OPTIONS[prefix], policy)


def _apply_dataset(config: Config, value: str) -> None:
    if value not in SUPPORTED_DATASETS:
        raise ConfigError('Unsupported dataset name! Please use "ldbc1" or "ldbc100"!')
    config.dataset = value


def _apply_background_type(config: Config, value: str) -> None:
    try:
        config.e4_bg_query_type = BackgroundQueryType(value)
    except ValueError as exc:
        raise ConfigError(
            'Error configuration with e4-background-type! Please use "small" or "large"!'
        ) from exc


def _consume(config: Config, arg: str) -> bool:
    """Apply ``arg`` to ``config``; return False if it is not a known option."""
    if arg.startswith("-dataset="):
        _apply_dataset(config, arg[len("-dataset="):])
        return True
    if arg in _SWITCH_OPTIONS:
        setattr(config, _SWITCH_OPTIONS[arg], False)
        return True
    if arg.startswith("-e4-background-type="):
        _apply_background_type(config, arg[len("-e4-background-type="):])
        return True
    for prefix in _NUMERIC_OPTIONS:
        if arg.startswith(prefix):
            _apply_numeric(config, prefix, arg[len(prefix):])
            return True
    for prefix in _POLICY_OPTIONS:
        if arg.startswith(prefix):
            _apply_policy(config, prefix, arg[len(prefix):])
            return True
    return False


def configure(argv: Sequence[str] | None = None) -> tuple[Config, list[str]]:
    """Parse ``argv`` (default ``sys.argv``) into a config and leftover arguments.

    Raises ConfigError for an unusable option value.
    """
    args = list(sys.argv if argv is None else argv)
    config = Config()
    remaining = [arg for arg in args if not _consume(config, arg)]
    return config, remaining