"""Library for common command line flags."""

from argparse import ArgumentParser
import pathlib

from deploy_kit.project import MissingProperty

DEFAULT_PROJECT_FILE = "project.yaml"
DEFAULT_HELM_CONFIG_FILE = "helm.yaml"


def add_project_flags(args: ArgumentParser) -> None:
    """Add flags for reading the project facts."""
    args.add_argument(
        "--project",
        help="Path to the yaml file with the project groupId, artifactId, version and properties",
        type=pathlib.Path,
        default=pathlib.Path(DEFAULT_PROJECT_FILE),
    )


def add_helm_config_flags(args: ArgumentParser) -> None:
    """Add flags for reading the helm chart configuration."""
    args.add_argument(
        "--helm-config",
        help="Path to the yaml file with the helm chart configuration",
        type=pathlib.Path,
        default=pathlib.Path(DEFAULT_HELM_CONFIG_FILE),
    )


def add_missing_property_flags(args: ArgumentParser) -> None:
    """Add flags for handling unresolved `${property}` references."""
    args.add_argument(
        "--missing",
        help="How to handle unresolved ${property} references",
        choices=[policy.value for policy in MissingProperty],
        default=MissingProperty.KEEP.value,
    )
