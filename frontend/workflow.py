"""
Text and Instance Creation Workflow
Pick an existing text or create a new one, then create an instance of it.
The instance is only submitted once the text creation has resolved.
"""

import logging
from typing import List, Optional

from frontend.api import GatewayRequestError
from frontend.config import ClientSettings, get_client_settings
from frontend.display import text_display_name
from frontend.forms import InstanceForm, TextForm
from frontend.hooks import TextQueries
from shared.schemas import TextSchema

logger = logging.getLogger(__name__)

STEP_SELECT = "select"
STEP_TEXT = "text"
STEP_INSTANCE = "instance"

SUCCESS_MESSAGE = "Text and Details created successfully!"
TEXTS_ROUTE = "/texts"


class WorkflowError(Exception):
    """Workflow cannot proceed with the current selection"""


def filter_texts(texts: List[TextSchema], search: str, limit: int = 50) -> List[TextSchema]:
    """Texts whose title (any language) or id contains the search string"""
    needle = (search or "").strip().lower()
    if not needle:
        return texts[:limit]

    matches = []
    for text in texts:
        title_matches = any(needle in (title or "").lower() for title in text.title.values())
        if title_matches or needle in text.id.lower():
            matches.append(text)
            if len(matches) >= limit:
                break
    return matches


class CreationWorkflow:
    """State of the combined text and instance creation page"""

    def __init__(self, queries: TextQueries, config: ClientSettings = None):
        self.queries = queries
        self.config = config or get_client_settings()
        self.step = STEP_SELECT
        self.texts: List[TextSchema] = []
        self.search = ""
        self.selected_text: Optional[TextSchema] = None
        self.created_text_id: Optional[str] = None
        self.text_form = TextForm()
        self.instance_form = InstanceForm.blank()
        self.is_submitting = False
        self.validation_errors: List[str] = []
        self.error: Optional[str] = None
        self.success: Optional[str] = None
        self.redirect_to: Optional[str] = None

    async def load_texts(self) -> List[TextSchema]:
        self.texts = await self.queries.texts({"limit": self.config.text_picker_page_size, "offset": 0})
        return self.texts

    def matching_texts(self) -> List[TextSchema]:
        return filter_texts(self.texts, self.search, self.config.text_search_limit)

    def set_search(self, value: str) -> None:
        self.search = value
        if not value:
            self.selected_text = None

    def select_text(self, text: TextSchema) -> None:
        self.selected_text = text
        self.created_text_id = None
        self.search = text_display_name(text)
        self.step = STEP_INSTANCE

    def start_new_text(self) -> None:
        self.selected_text = None
        self.created_text_id = None
        self.search = ""
        self.step = STEP_TEXT

    def cancel_instance(self) -> None:
        self.step = STEP_TEXT if self.created_text_id else STEP_SELECT

    @property
    def target_text_id(self) -> Optional[str]:
        if self.created_text_id:
            return self.created_text_id
        return self.selected_text.id if self.selected_text else None

    def validate(self) -> List[str]:
        errors = []
        if self.step == STEP_TEXT and not self.created_text_id:
            errors.extend(self.text_form.validate())
        elif self.step == STEP_SELECT:
            errors.append("Select an existing text or create a new one")
        errors.extend(self.instance_form.validate())
        return errors

    async def submit(self) -> bool:
        """
        Create the text when needed, then the instance

        Returns:
            True when both steps succeeded. Otherwise `validation_errors` or
            `error` explain why; a text created before a failed instance is
            kept in `created_text_id` and is not created again on retry.
        """
        self.error = None
        self.success = None
        self.redirect_to = None
        self.validation_errors = self.validate()
        if self.validation_errors:
            return False

        self.is_submitting = True
        try:
            if self.step == STEP_TEXT and not self.created_text_id:
                created = await self.queries.create_text(self.text_form.to_payload())
                text_id = created.get("id") if isinstance(created, dict) else None
                if not text_id:
                    raise WorkflowError("Text creation returned no id")
                self.created_text_id = text_id
                logger.info(f"Created text {text_id}")

            text_id = self.target_text_id
            if not text_id:
                raise WorkflowError("No text selected or created")

            await self.queries.create_text_instance(text_id, self.instance_form.to_payload())
            self.success = SUCCESS_MESSAGE
            self.redirect_to = TEXTS_ROUTE
            return True
        except (GatewayRequestError, WorkflowError) as e:
            logger.error(f"Creation workflow failed: {e}")
            self.error = f"Failed to create: {e}"
            if self.created_text_id:
                self.redirect_to = f"{TEXTS_ROUTE}/{self.created_text_id}/instances"
            return False
        finally:
            self.is_submitting = False
