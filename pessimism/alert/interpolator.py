"""Rendering of alert messages for delivery destinations."""

from __future__ import annotations

from pessimism.core.ids import SUUID

CODE_BLOCK_FMT = "```{}```"

SLACK_MSG_FMT = (
    "\n\t\u26a0\ufe0f\U0001f6a8 Pessimism Alert: {heuristic} \U0001f6a8\u26a0\ufe0f\n\n"
    "\t_Heuristic activation conditions met_\n\n"
    "\t_Network:_ {network}\n"
    "\t_Session UUID:_ {suuid}\n\n"
    "\t*Assessment Content:* \n"
    "\t{content}\t\n\n"
    "\t*Message:*\n"
    "\t{message}\n\n"
    "\t"
)

PAGER_DUTY_MSG_FMT = (
    "\n\tHeuristic Triggered: {heuristic}\n"
    "\tNetwork: {network}\n"
    "\tAssessment: \n"
    "\t{message}\n"
    "\t"
)


def interpolate_slack_message(suuid: SUUID, content: str, message: str) -> str:
    """Render a Slack alert for a heuristic session."""
    return SLACK_MSG_FMT.format(
        heuristic=suuid.pid.heuristic_type(),
        network=suuid.pid.network(),
        suuid=suuid,
        content=CODE_BLOCK_FMT.format(content),
        message=message,
    )


def interpolate_pagerduty_message(suuid: SUUID, message: str) -> str:
    """Render a PagerDuty alert summary for a heuristic session."""
    return PAGER_DUTY_MSG_FMT.format(
        heuristic=suuid.pid.heuristic_type(),
        network=suuid.pid.network(),
        message=message,
    )