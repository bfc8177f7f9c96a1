"""
Pipeline Controller - sequences the four stages for one video idea.

The controller owns the PipelineState. Every change goes through
``reduce``; the controller only decides which backend call to make for the
current stage and turns its outcome into an event.

Runs are single-flight: submitting while a stage is in flight raises
PipelineBusyError. Each run has a run_id, and results that come back for a
run that is no longer current (after reset) are dropped.
"""

import asyncio
import uuid
from typing import Callable, List, Optional

from scriptwriter.core import get_logger, set_run_id, set_pipeline_stage, BackendError, InvalidTransitionError, PipelineBusyError
from scriptwriter.models import ComponentCategory, PipelineStage, VoiceProfile

from .backends import ScriptwritingBackend
from .state import (
    ComponentSelected,
    ComponentsGenerated,
    ContentExtracted,
    FinalScriptGenerated,
    PipelineState,
    Reset,
    ReturnedToSelection,
    SelectionCleared,
    SourcesGathered,
    StageFailed,
    StageRetried,
    Submitted,
    reduce,
    resolve_selection,
)

logger = get_logger(__name__, component="pipeline_controller")

Subscriber = Callable[[PipelineState], None]


class PipelineController:
    """Drives one scriptwriting pipeline against a backend"""

    def __init__(self, backend: ScriptwritingBackend, voice_profile: Optional[VoiceProfile] = None):
        self.backend = backend
        self.voice_profile = voice_profile
        self._state = PipelineState()
        self._task: Optional[asyncio.Task] = None
        self._subscribers: List[Subscriber] = []

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback`` with the new state after every change. Returns an unsubscribe function."""
        self._subscribers.append(callback)
        return lambda: self._subscribers.remove(callback)

    def _dispatch(self, event: object) -> PipelineState:
        new_state = reduce(self._state, event)
        if new_state is self._state:
            return new_state

        previous = self._state.stage
        self._state = new_state
        if new_state.stage != previous:
            logger.info(
                f"Stage {previous.value} -> {new_state.stage.value}",
                extra={"event": type(event).__name__},
            )
        for callback in list(self._subscribers):
            try:
                callback(new_state)
            except Exception:
                logger.exception("State subscriber raised")
        return new_state

    # === User actions ===

    async def submit(self, video_idea: str) -> PipelineState:
        """Start a run. A blank idea leaves the state unchanged."""
        if self.busy or self._state.stage.is_in_progress():
            raise PipelineBusyError("A scriptwriting run is already in progress")

        state = self._dispatch(Submitted(video_idea, uuid.uuid4().hex))
        if state.stage == PipelineStage.GATHERING_SOURCES:
            self._start()
        else:
            logger.info("Ignoring blank video idea")
        return state

    def select(self, category: ComponentCategory | str, index: int) -> PipelineState:
        """Choose an option; the fourth choice starts final assembly."""
        state = self._dispatch(ComponentSelected(ComponentCategory(category), index))
        if state.stage == PipelineStage.GENERATING_FINAL_SCRIPT:
            self._start()
        return state

    def clear_selection(self, category: ComponentCategory | str) -> PipelineState:
        return self._dispatch(SelectionCleared(ComponentCategory(category)))

    async def retry(self) -> PipelineState:
        """Restart the failed run from the top with the same idea."""
        if self._state.stage != PipelineStage.ERROR:
            raise InvalidTransitionError(f"retry is not allowed in stage '{self._state.stage.value}'")
        return await self.submit(self._state.video_idea)

    def retry_stage(self) -> PipelineState:
        """Replay only the stage that failed, keeping everything before it."""
        state = self._dispatch(StageRetried())
        self._start()
        return state

    def back_to_selection(self) -> PipelineState:
        """Discard the script and return to choosing components."""
        return self._dispatch(ReturnedToSelection())

    def reset(self) -> PipelineState:
        """Abandon any run in flight and return to idle."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        return self._dispatch(Reset())

    async def wait(self) -> PipelineState:
        """Wait until no stage is in flight (run parked, complete, or failed)."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self._state

    async def run(self, video_idea: str) -> PipelineState:
        """Submit and wait for the run to park at selection or finish."""
        await self.submit(video_idea)
        return await self.wait()

    # === Stage driving ===

    def _start(self) -> None:
        self._task = asyncio.create_task(self._drive(self._state.run_id))

    async def _drive(self, run_id: str) -> None:
        set_run_id(run_id)
        while self._state.run_id == run_id and self._state.stage.is_in_progress():
            stage = self._state.stage
            set_pipeline_stage(stage.value)
            try:
                event = await self._run_stage(self._state)
            except Exception as e:
                logger.warning(f"Stage {stage.value} failed: {e}")
                event = StageFailed(str(e) or type(e).__name__)

            if self._state.run_id != run_id or self._state.stage != stage:
                logger.info(f"Discarding stale {stage.value} result", extra={"stale_run_id": run_id})
                return
            try:
                self._dispatch(event)
            except InvalidTransitionError as e:
                self._dispatch(StageFailed(str(e)))

    async def _run_stage(self, state: PipelineState) -> object:
        if state.stage == PipelineStage.GATHERING_SOURCES:
            sources = await self.backend.gather_sources(state.video_idea)
            return SourcesGathered(tuple(sources))

        if state.stage == PipelineStage.EXTRACTING_CONTENT:
            enriched = await self.backend.extract_content(list(state.sources))
            if len(enriched) != len(state.sources):
                raise BackendError(
                    f"Content extraction returned {len(enriched)} sources for {len(state.sources)}"
                )
            return ContentExtracted(tuple(enriched))

        if state.stage == PipelineStage.GENERATING_COMPONENTS:
            components = await self.backend.generate_components(state.video_idea, list(state.sources))
            return ComponentsGenerated(components)

        if state.stage == PipelineStage.GENERATING_FINAL_SCRIPT:
            script = await self.backend.generate_final_script(
                state.video_idea,
                resolve_selection(state),
                self.voice_profile,
            )
            return FinalScriptGenerated(script)

        raise InvalidTransitionError(f"Nothing to run in stage '{state.stage.value}'")
