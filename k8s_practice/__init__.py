"""K8s practice service: probes, introspection and a toy items API."""

from importlib.metadata import PackageNotFoundError, version as get_version

PACKAGE_NAME = "k8s-practice"


def get_app_version() -> str:
    """Get application version from package metadata."""
    try:
        return get_version(PACKAGE_NAME)
    except PackageNotFoundError:
        return "0.0.0-dev"
