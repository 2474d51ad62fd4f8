"""
Derived provisioning summary.

The provisioning endpoint does not report how many accounts were
updated. Everything that needs that number goes through
derive_provisioning_summary so it is computed in one place.
"""

from dataclasses import dataclass
from typing import Sequence

from coop_backend.app.models.enums import ProvisioningStatus
from coop_backend.app.schemas.provisioning import ProvisioningResultItem, ProvisioningSummary

TONE_SUCCESS = "success"
TONE_NEUTRAL = "neutral"
TONE_DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class ProvisioningNotice:
    tone: str
    title: str
    description: str


@dataclass(frozen=True)
class DerivedProvisioningSummary:
    total: int
    created: int
    updated: int
    errors: int
    existing: int
    notice: ProvisioningNotice
    
    @property
    def changed(self) -> int:
        return self.created + self.updated


FAILURE_NOTICE = ProvisioningNotice(
    tone=TONE_DESTRUCTIVE,
    title="Error",
    description="Demo users could not be provisioned",
)


def count_updated(results: Sequence[ProvisioningResultItem]) -> int:
    return sum(1 for item in results if item.status == ProvisioningStatus.UPDATED)


def derive_provisioning_summary(
    results: Sequence[ProvisioningResultItem],
    summary: ProvisioningSummary,
) -> DerivedProvisioningSummary:
    """
    Combine the endpoint summary with the updated count from the results.
    
    The notice is success-toned when anything was created or updated,
    neutral otherwise.
    """
    updated = count_updated(results)
    changed = summary.created + updated
    
    if changed > 0:
        notice = ProvisioningNotice(
            tone=TONE_SUCCESS,
            title="Users provisioned",
            description=f"{summary.created} created, {updated} updated",
        )
    else:
        notice = ProvisioningNotice(
            tone=TONE_NEUTRAL,
            title="No changes",
            description="All demo users already exist",
        )
    
    return DerivedProvisioningSummary(
        total=summary.total,
        created=summary.created,
        updated=updated,
        errors=summary.errors,
        existing=summary.existing,
        notice=notice,
    )
