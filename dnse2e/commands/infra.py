"""Infra command: provision e2e infrastructure, or show a saved infra file."""

import asyncio
import logging
import os
import sys
from pathlib import Path

from dnse2e.clients.azure import Azure
from dnse2e.errors import Dnse2eError
from dnse2e.infra.infras import default_infras, filter_names, load_infras
from dnse2e.infra.provision import provision_all
from dnse2e.infra.types import dump_snapshot, load_snapshot

logger = logging.getLogger(__name__)

TENANT_ENV = "AZURE_TENANT_ID"
SUBSCRIPTION_ENV = "AZURE_SUBSCRIPTION_ID"


def _select_infras(args):
    infras = load_infras(args.config) if args.config else default_infras()
    if args.names:
        selected = filter_names(infras, args.names)
        missing = sorted(set(args.names) - {i.name for i in selected})
        if missing:
            logger.error(f"Unknown infra names: {', '.join(missing)}")
            sys.exit(1)
        infras = selected
    return infras


def handle_provision(args):
    """Handle the infra provision command."""
    tenant_id = args.tenant_id or os.environ.get(TENANT_ENV)
    subscription_id = args.subscription_id or os.environ.get(SUBSCRIPTION_ENV)
    if not tenant_id or not subscription_id:
        logger.error(f"Tenant and subscription ids are required (--tenant-id/--subscription-id or ${TENANT_ENV}/${SUBSCRIPTION_ENV})")
        sys.exit(1)

    try:
        infras = _select_infras(args)
    except Dnse2eError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"Provisioning: {', '.join(i.name for i in infras)}")
    try:
        provisioned = asyncio.run(_provision(infras, tenant_id, subscription_id, args))
    except Dnse2eError as e:
        logger.error(f"Provisioning failed: {e}")
        sys.exit(1)

    Path(args.infra_file).write_text(dump_snapshot(provisioned))
    logger.info(f"Saved {len(provisioned)} provisioned infras to {args.infra_file}")


async def _provision(infras, tenant_id, subscription_id, args):
    azure = Azure(log_dir=args.log_dir, job_timeout=args.job_timeout)
    try:
        return await provision_all(infras, tenant_id, subscription_id, azure)
    finally:
        await azure.close()


def handle_show(args):
    """Handle the infra show command."""
    path = Path(args.infra_file)
    if not path.exists():
        logger.error(f"No infra file found at {path}")
        sys.exit(1)

    try:
        provisioned = load_snapshot(path.read_text())
    except Dnse2eError as e:
        logger.error(str(e))
        sys.exit(1)

    for p in provisioned:
        logger.info(f"{p.name}")
        logger.info(f"  resource group: {p.resource_group.name}")
        logger.info(f"  cluster:        {p.cluster.name} ({p.cluster.location})")
        if p.cluster.options:
            logger.info(f"  options:        {', '.join(sorted(p.cluster.options))}")
        for z in p.zones:
            logger.info(f"  zone:           {z.name} ({', '.join(z.nameservers) or 'no nameservers'})")
        for z in p.private_zones:
            logger.info(f"  private zone:   {z.name}")
        logger.info(f"  services:       {p.ipv4_service_name}, {p.ipv6_service_name}")


def register_infra_command(subparsers):
    """Register the 'infra' command with provision/show action subparsers."""
    infra_parser = subparsers.add_parser("infra", help="Provision and inspect e2e infrastructure")
    action_subparsers = infra_parser.add_subparsers(dest="action", required=True)

    provision_parser = action_subparsers.add_parser("provision", help="Provision infrastructure and save an infra file")
    provision_parser.add_argument("--infra-file", required=True, help="Path to write the provisioned infra JSON")
    provision_parser.add_argument("--config", default=None, help="YAML file with infra definitions (default: built-in set)")
    provision_parser.add_argument("--names", nargs="+", default=None, help="Only provision infras with these names")
    provision_parser.add_argument("--tenant-id", default=None, help=f"Azure tenant id (default: ${TENANT_ENV})")
    provision_parser.add_argument("--subscription-id", default=None, help=f"Azure subscription id (default: ${SUBSCRIPTION_ENV})")
    provision_parser.add_argument("--log-dir", default=".", help="Directory for job log files (default: .)")
    provision_parser.add_argument(
        "--job-timeout",
        type=float,
        default=None,
        help="Fail a job wait after this many seconds (default: wait until the job finishes)",
    )
    provision_parser.set_defaults(func=handle_provision)

    show_parser = action_subparsers.add_parser("show", help="Show a saved infra file")
    show_parser.add_argument("--infra-file", required=True, help="Path of the provisioned infra JSON")
    show_parser.set_defaults(func=handle_show)
