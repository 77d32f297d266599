import logging
import httpx
from pydantic import ValidationError
from app.api.schemas import ServerInfo
from app.console.outcome import Outcome
from app.console.view import InfoPanel

logger = logging.getLogger("directory_configurator")

class DirectoryConfigurator:
    """
    Shows the server's addresses and storage directory, and changes the
    directory.

    Failures never touch the panel. After a directory change the panel is
    always refreshed from /info, so it shows what the server actually uses
    rather than what was typed.
    """

    def __init__(self, client: httpx.AsyncClient, panel: InfoPanel):
        self.client = client
        self.panel = panel

    async def fetch_info(self) -> Outcome:
        try:
            response = await self.client.get("/info")
        except httpx.HTTPError as e:
            logger.warning(f"Fetching server info failed: {str(e)}")
            return Outcome.failure(str(e))

        if not response.is_success:
            logger.warning(f"Fetching server info returned HTTP {response.status_code}")
            return Outcome.failure(f"HTTP {response.status_code}", status_code=response.status_code)

        try:
            info = ServerInfo.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning(f"Invalid server info: {str(e)}")
            return Outcome.failure("invalid server info", status_code=response.status_code)

        self.panel.show(info)
        return Outcome.success(info, status_code=response.status_code)

    async def set_directory(self, path: str) -> Outcome:
        """
        Ask the server to store uploads in ``path``, then re-read its info.

        Returns the outcome of the change request itself.
        """
        try:
            response = await self.client.post("/set_dir", json={"dir": path})
        except httpx.HTTPError as e:
            logger.warning(f"Setting directory to {path} failed: {str(e)}")
            outcome = Outcome.failure(str(e))
        else:
            if response.is_success:
                outcome = Outcome.success(status_code=response.status_code)
            else:
                logger.warning(f"Setting directory to {path} returned HTTP {response.status_code}")
                outcome = Outcome.failure(f"HTTP {response.status_code}", status_code=response.status_code)

        await self.fetch_info()
        return outcome
