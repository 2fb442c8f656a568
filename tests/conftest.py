"""
Core configuration
"""

import pytest_asyncio
from testcontainers.core.container import DockerContainer
from testcontainers.core.waiting_utils import wait_for_logs

from groupsync.config.settings import Settings

EMULATOR_IMAGE = "gcr.io/google.com/cloudsdktool/google-cloud-cli:emulators"
EMULATOR_PORT = 8080


@pytest_asyncio.fixture(scope="session")
def firestore_emulator():
    container = (
        DockerContainer(EMULATOR_IMAGE)
        .with_command(
            f"gcloud emulators firestore start --host-port=0.0.0.0:{EMULATOR_PORT}"
        )
        .with_exposed_ports(EMULATOR_PORT)
    )

    with container:
        wait_for_logs(container, "Dev App Server is now running", timeout=120)
        host = container.get_container_host_ip()
        port = container.get_exposed_port(EMULATOR_PORT)

        yield {
            "firestore_project": "groupsync-test",
            "firestore_emulator_host": f"{host}:{port}",
        }


@pytest_asyncio.fixture(scope="session")
def server_settings():
    yield Settings(log_level="debug")


@pytest_asyncio.fixture(scope="session")
def logger(server_settings: Settings):
    yield server_settings.logger()
