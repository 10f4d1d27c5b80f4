"""Day/night routing-flow switch across PBX lines."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from ..config import Settings
from ..errors import ClientInputError, ConfigurationError, ProxyError
from ..models.domain import FlowAssignment
from .mundosms.client import MundoSmsClient

logger = logging.getLogger(__name__)

MODES = ("day", "night")
FAILURE_ENVELOPE = {"ok": False}


@dataclass(frozen=True, slots=True)
class FlowSwitchPlan:
    mode: str
    flow_id: str
    targets: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class FlowSwitchResult:
    mode: str
    flow_id: str
    results: list[FlowAssignment]

    @property
    def ok(self) -> bool:
        return all(item.success for item in self.results)


def plan_switch(mode: str | None, pbx: str | None, config: Settings) -> FlowSwitchPlan:
    """Validate the request and configuration before any upstream call."""
    if mode not in MODES:
        raise ClientInputError("Use mode=day|night", extra=FAILURE_ENVELOPE)

    targets = config.pbx_targets(pbx)
    if (
        not targets
        or not config.flow_id_day
        or not config.flow_id_night
        or not config.provider_api_base
        or not config.provider_api_token
    ):
        logger.error("Flow switch requested with incomplete provider configuration")
        raise ConfigurationError("Missing required environment variables.", extra=FAILURE_ENVELOPE)

    flow_id = config.flow_id_day if mode == "day" else config.flow_id_night
    return FlowSwitchPlan(mode=mode, flow_id=flow_id, targets=targets)


def assign_flows(client: MundoSmsClient, flow_id: str, targets: Iterable[str]) -> list[FlowAssignment]:
    """Assign the flow to each line in turn; one line failing never stops the rest."""
    results = []
    for pbx_id in targets:
        try:
            client.assign_flow(pbx_id, flow_id)
        except ProxyError as exc:
            logger.warning(f"Assigning flow {flow_id} to PBX {pbx_id} failed: {exc.message}")
            results.append(FlowAssignment(pbx_id=pbx_id, success=False, error=exc.message))
        else:
            results.append(FlowAssignment(pbx_id=pbx_id, success=True))
    return results


def switch_flow(client: MundoSmsClient, plan: FlowSwitchPlan) -> FlowSwitchResult:
    results = assign_flows(client, plan.flow_id, plan.targets)
    outcome = FlowSwitchResult(mode=plan.mode, flow_id=plan.flow_id, results=results)
    logger.info(
        f"Switched {sum(item.success for item in results)}/{len(results)} PBX lines to {plan.mode} flow {plan.flow_id}"
    )
    return outcome
