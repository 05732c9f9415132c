"""Editing session: one graph, its naming fields, and where they are saved.

Every user action goes through the session so that conditional groups stay
consistent and the saved specification always reflects the latest graph:

    session = EditorSession(store=SqliteStore())
    session.restore()
    a = session.add_step("Supervisor")
    session.connect(session.graph.entry.node_id, a.node_id)
"""

from __future__ import annotations

import json
import logging
import sqlite3

from flowspec.adapters.store import (
    CUSTOM_TEMPLATES_KEY,
    EDGE_LABELS_KEY,
    GRAPH_CONFIG_KEY,
    LANGUAGE_KEY,
    SKIP_TEMPLATES_KEY,
    SPEC_KEY,
    InMemoryStore,
    KeyValueStore,
)
from flowspec.compiler.decoder import DecodedSpec, decode_spec
from flowspec.compiler.encoder import encode_spec
from flowspec.compiler.grouping import LabelGroupingEngine
from flowspec.errors import SpecError
from flowspec.models.codegen import GenerateRequest, GenerateResponse
from flowspec.models.graph_model import Edge, GraphModel, Position, StepNode
from flowspec.models.spec_document import SpecConfig
from flowspec.sdk.codegen_client import CodegenClient


logger = logging.getLogger(__name__)


class EditorSession:
    """Owns the GraphModel being edited and keeps its saved spec current."""

    def __init__(
        self,
        store: KeyValueStore | None = None,
        config: SpecConfig | None = None,
    ) -> None:
        self.store = store if store is not None else InMemoryStore()
        self.config = config or SpecConfig()
        self.graph = GraphModel.empty()
        self.engine = LabelGroupingEngine()

        self.skip_templates: list[str] = []
        self.custom_templates: dict[str, str] = {}
        self.spec: str = ""

    # --- persistence ---

    def _write(self, key: str, value: str) -> None:
        # fire-and-forget: a failed write only loses the latest change
        try:
            self.store.set(key, value)
        except (OSError, sqlite3.Error) as e:
            logger.error("failed to persist %s: %s", key, e)

    def _read_json(self, key: str, default):
        raw = self.store.get(key)
        if not raw:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("ignoring unreadable value stored under %s", key)
            return default

    def _commit(self) -> str:
        """Re-encode after a mutation and save the result."""
        self.spec = encode_spec(self.graph, self.config)
        self._save_spec()
        return self.spec

    def _save_spec(self) -> None:
        self._write(SPEC_KEY, self.spec)
        self._write(EDGE_LABELS_KEY, json.dumps(self.graph.condition_labels))

    def _save_config(self) -> None:
        self._write(GRAPH_CONFIG_KEY, self.config.model_dump_json(exclude={"language"}))
        self._write(LANGUAGE_KEY, self.config.language)

    # --- loading ---

    def restore(self) -> None:
        """Bring back saved settings and the last saved graph, if any."""
        saved_config = self._read_json(GRAPH_CONFIG_KEY, {})
        if isinstance(saved_config, dict):
            # unknown or empty entries keep the current values
            merged = self.config.model_dump()
            merged.update({k: v for k, v in saved_config.items() if k in merged and v})
            self.config = SpecConfig.model_validate(merged)

        language = self.store.get(LANGUAGE_KEY)
        if language in ("python", "typescript"):
            self.config = self.config.model_copy(update={"language": language})

        self.skip_templates = list(self._read_json(SKIP_TEMPLATES_KEY, []))
        self.custom_templates = dict(self._read_json(CUSTOM_TEMPLATES_KEY, {}))

        saved_spec = self.store.get(SPEC_KEY)
        if not saved_spec:
            return
        try:
            self.load(saved_spec)
        except SpecError as e:
            logger.error("saved graph could not be restored, starting empty: %s", e)
            return
        logger.info("restored graph with %d step(s)", len(self.graph.steps))

    def load(self, text: str) -> DecodedSpec:
        """Replace the graph with one decoded from specification text.

        Raises:
            ParseError: if the text is malformed
            StructuralInvariantViolation: if the decoded graph cannot be re-encoded

        On either error the current graph, config and saved state are kept.
        """
        decoded = decode_spec(text)
        spec = encode_spec(decoded.graph, decoded.config)

        self.graph = decoded.graph
        self.config = decoded.config
        self.spec = spec
        self._save_config()
        self._save_spec()
        return decoded

    def reset(self) -> None:
        """Start over with an empty graph and forget the saved one."""
        self.graph = GraphModel.empty()
        self.spec = ""
        self.store.delete(SPEC_KEY)
        self.store.delete(EDGE_LABELS_KEY)

    # --- graph edits ---

    def add_step(self, label: str | None = None, position: Position | None = None) -> StepNode:
        node = self.graph.add_step(label, position)
        self._commit()
        return node

    def rename_step(self, node_id: str, label: str) -> None:
        self.graph.rename_node(node_id, label)
        self._commit()

    def remove_step(self, node_id: str) -> None:
        self.graph.remove_node(node_id)
        self._commit()

    def connect(self, source_id: str, target_id: str) -> Edge:
        edge = self.engine.connect(self.graph, source_id, target_id)
        self._commit()
        return edge

    def disconnect(self, edge_id: str) -> None:
        self.engine.disconnect(self.graph, edge_id)
        self._commit()

    def toggle_branch(self, edge_id: str) -> Edge:
        edge = self.engine.toggle_branch(self.graph, edge_id)
        self._commit()
        return edge

    def rename_condition(self, source_id: str, label: str) -> None:
        self.engine.rename_condition(self.graph, source_id, label)
        self._commit()

    # --- settings ---

    def update_config(self, **fields: str) -> None:
        """Change scalar naming fields, e.g. update_config(name="Researcher")."""
        merged = self.config.model_dump()
        merged.update(fields)
        self.config = SpecConfig.model_validate(merged)
        self._save_config()
        self._commit()

    def set_language(self, language: str) -> None:
        self.update_config(language=language)

    def set_skip_templates(self, template_types: list[str]) -> None:
        self.skip_templates = list(template_types)
        self._write(SKIP_TEMPLATES_KEY, json.dumps(self.skip_templates))

    def select_template(self, template_type: str, template_name: str) -> None:
        """Pick a template for one file type; "default" clears the choice."""
        if template_name == "default":
            self.custom_templates.pop(template_type, None)
        else:
            self.custom_templates[template_type] = template_name
        self._write(CUSTOM_TEMPLATES_KEY, json.dumps(self.custom_templates))

    # --- code generation ---

    def build_generate_request(self, language: str | None = None) -> GenerateRequest:
        """Request for the current graph, optionally in another language."""
        config = self.config
        if language is not None:
            config = config.model_copy(update={"language": language})
        return GenerateRequest(
            spec=encode_spec(self.graph, config),
            language=config.language,
            skip=list(self.skip_templates) or None,
            templates=dict(self.custom_templates),
        )

    def generate(self, client: CodegenClient, language: str | None = None) -> GenerateResponse:
        """Send the current graph to the code generation service.

        Raises:
            CodegenError: if the service fails; the session is left untouched
        """
        return client.generate(self.build_generate_request(language))
