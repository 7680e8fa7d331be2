"""Role assignments granting the cluster identity access to provisioned resources.

Each call creates a new assignment with a fresh id, so assignments are not
idempotent: repeating a call either adds a duplicate grant or is rejected
by ARM with ``RoleAssignmentExists``. Callers must not retry blindly.
"""

import logging
import uuid
from dataclasses import dataclass

from azure.mgmt.authorization.models import RoleAssignmentCreateParameters

from dnse2e.clients.arm import arm_call

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Role:
    """Built-in role. ``id`` is a format string taking the subscription id."""

    name: str
    id: str

    def definition_id(self, subscription_id: str) -> str:
        return self.id.format(subscription_id)


# https://learn.microsoft.com/en-us/azure/role-based-access-control/built-in-roles
DNS_CONTRIBUTOR_ROLE = Role(
    name="DNS Zone Contributor",
    id="/subscriptions/{}/providers/Microsoft.Authorization/roleDefinitions/befefa01-2a29-4197-83a8-272ff33ce314",
)
PRIVATE_DNS_CONTRIBUTOR_ROLE = Role(
    name="Private DNS Zone Contributor",
    id="/subscriptions/{}/providers/Microsoft.Authorization/roleDefinitions/b12aa53e-6015-4669-85d0-8515ebb3ae7f",
)
NETWORK_CONTRIBUTOR_ROLE = Role(
    name="Network Contributor",
    id="/subscriptions/{}/providers/Microsoft.Authorization/roleDefinitions/b34d265f-36f7-4a0d-a4d4-e158ca92e90f",
)


async def assign_role(authorization, subscription_id, scope, principal_id, role, principal_type="ServicePrincipal"):
    """Grant *role* to *principal_id* over *scope*.

    Args:
        authorization: ``AuthorizationManagementClient`` for *subscription_id*.

    Returns:
        The generated role assignment name (uuid string).

    Raises:
        ArmError: if ARM rejects the assignment.
    """
    assignment_name = str(uuid.uuid4())
    logger.info(f"Assigning '{role.name}' to {principal_id} on {scope}")
    params = RoleAssignmentCreateParameters(
        role_definition_id=role.definition_id(subscription_id),
        principal_id=principal_id,
        principal_type=principal_type,
    )
    await arm_call(
        f"assigning '{role.name}' on {scope}",
        authorization.role_assignments.create(scope, assignment_name, params),
    )
    return assignment_name
