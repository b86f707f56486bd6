"""
Tactical Board - Board Controller
Wires timeline, playback clock, analytics, drawings and renderer together.

Data flows one way per tick:
    clock time -> Timeline.interpolate -> entity positions -> movement tracker
    -> renderer -> spatial analytics -> metrics listeners
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from loguru import logger

from tactical_board.analysis.advisory import AdvisoryService, build_context_summary
from tactical_board.analysis.formations import AWAY_ID_OFFSET, create_team, initial_positions
from tactical_board.analysis.movement import MovementTracker
from tactical_board.analysis.spatial import SpatialMetrics, compute_spatial_metrics
from tactical_board.annotation.session import AnnotationSession
from tactical_board.core.models import (
    Annotation,
    Entity,
    EntityId,
    EventMarker,
    EventType,
    Keyframe,
    Phase,
    Position,
    Role,
    Team,
)
from tactical_board.core.playback import FrameScheduler, PlaybackClock
from tactical_board.core.timeline import Timeline
from tactical_board.data.importer import ImportedMovement, load_movement_file, parse_movement_data
from tactical_board.data.serialization import PlanSerializer
from tactical_board.render.pitch_renderer import Renderer

MetricsListener = Callable[[SpatialMetrics], None]


class TacticalBoard:
    """
    One tactical board session.

    All state lives on the instance; several boards can coexist.
    """

    def __init__(
        self,
        settings=None,
        scheduler: Optional[FrameScheduler] = None,
        renderer: Optional[Renderer] = None
    ):
        """
        Args:
            settings: Settings instance (default: global settings)
            scheduler: Frame source for playback (None: drive with tick())
            renderer: Display adapter (None: headless)
        """
        if settings is None:
            from config import settings
        self.settings = settings

        self.timeline = Timeline(duration=settings.default_duration)
        self.clock = PlaybackClock(
            duration=self.timeline.duration,
            speed=settings.default_speed,
            scheduler=scheduler,
            loop=settings.loop_playback,
        )
        self.annotations = AnnotationSession(eraser_radius=settings.eraser_radius)
        self.movement = MovementTracker(trail_length=settings.trail_length_seconds)
        self.renderer = renderer

        self.home_formation: Optional[str] = None
        self.away_formation: Optional[str] = None
        self.current_phase: Optional[Phase] = None

        self._entities: Dict[EntityId, Entity] = {}
        self._event_markers: List[EventMarker] = []
        self._metrics = SpatialMetrics()
        self._metrics_listeners: List[MetricsListener] = []

        self.clock.subscribe(self._on_time)
        self.annotations.add_listener(self._on_annotations)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def entities(self) -> List[Entity]:
        return list(self._entities.values())

    @property
    def positions(self) -> Dict[EntityId, Position]:
        return {entity_id: e.position for entity_id, e in self._entities.items()}

    @property
    def event_markers(self) -> List[EventMarker]:
        return list(self._event_markers)

    @property
    def current_time(self) -> float:
        return self.clock.current_time

    def entity(self, entity_id: EntityId) -> Optional[Entity]:
        return self._entities.get(entity_id)

    def add_metrics_listener(self, listener: MetricsListener):
        self._metrics_listeners.append(listener)

    # ------------------------------------------------------------------
    # Setup and editing
    # ------------------------------------------------------------------

    def load_formations(self, home: str = "4-4-2", away: str = "4-3-3"):
        """
        Place both teams in catalog formations.

        Starts a fresh timeline whose only keyframe is the formation shape at t=0.

        Raises:
            FormationNotFoundError: If either name is not in the catalog
        """
        home_team = create_team(Team.HOME, home)
        away_team = create_team(Team.AWAY, away)

        entities = home_team + away_team
        self.clock.stop()
        self.timeline.clear()
        self.timeline.set_duration(self.settings.default_duration)
        self.timeline.insert_keyframe(0.0, initial_positions(entities), Phase.DEFENSE)
        self._sync_duration()

        self.home_formation = home
        self.away_formation = away
        self._set_entities(entities)
        logger.info(f"Loaded formations {home} vs {away}")

    def _set_entities(self, entities: List[Entity]):
        self._entities = {e.id: e for e in entities}
        self.movement.reset()
        if hasattr(self.renderer, "register_entities"):
            self.renderer.register_entities(self.entities)
        self._publish(self.positions, track_movement=False)

    def drag_entity(self, entity_id: EntityId, position: Position) -> bool:
        """
        Move one entity by hand. Ignored while playing.

        Returns:
            True if the entity was moved
        """
        if self.clock.is_playing:
            logger.debug(f"Drag of {entity_id} ignored during playback")
            return False
        entity = self._entities.get(entity_id)
        if entity is None:
            logger.warning(f"Drag of unknown entity {entity_id}")
            return False

        self._entities[entity_id] = entity.moved_to(position)
        self._publish(self.positions, track_movement=False)
        return True

    def set_phase(self, phase: Optional[Phase]):
        self.current_phase = Phase(phase) if phase is not None else None

    def record_keyframe(self, phase: Optional[Phase] = None, time: Optional[float] = None) -> Keyframe:
        """
        Snapshot current positions into the timeline.

        Args:
            phase: Phase tag (default: current phase)
            time: Keyframe time (default: current playback time)
        """
        time = self.clock.current_time if time is None else time
        phase = phase if phase is not None else self.current_phase
        keyframe = self.timeline.insert_keyframe(time, self.positions, phase)
        self._sync_duration()
        logger.info(f"Recorded keyframe at {time:.1f}s ({len(self.timeline)} total)")
        return keyframe

    def remove_keyframe(self, time: float) -> bool:
        return self.timeline.remove_keyframe(time)

    def clear_keyframes(self):
        duration = self.timeline.duration
        self.timeline.clear()
        self.timeline.set_duration(duration)
        logger.info("Keyframes cleared")

    def set_duration(self, duration: float):
        """
        Raises:
            InvalidDurationError: If shorter than the last keyframe
        """
        self.timeline.set_duration(duration)
        self._sync_duration()

    def _sync_duration(self):
        if self.clock.duration != self.timeline.duration:
            self.clock.set_duration(self.timeline.duration)

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def play(self):
        self.clock.play()

    def pause(self):
        self.clock.pause()

    def toggle_playback(self):
        self.clock.toggle()

    def stop(self):
        self.clock.stop()

    def seek(self, time: float):
        self.clock.seek(time)

    def set_speed(self, speed: float):
        """
        Raises:
            InvalidSpeedError: If speed is not positive
        """
        self.clock.set_speed(speed)

    def tick(self, delta_seconds: float) -> float:
        return self.clock.tick(delta_seconds)

    # ------------------------------------------------------------------
    # Event markers
    # ------------------------------------------------------------------

    def add_event_marker(
        self,
        time: float,
        label: str,
        description: Optional[str] = None,
        related_entity_ids: Optional[List[EntityId]] = None,
        event_type: EventType = EventType.HIGHLIGHT
    ) -> EventMarker:
        marker = EventMarker(
            time=time,
            label=label,
            description=description,
            related_entity_ids=list(related_entity_ids or []),
            event_type=EventType(event_type),
        )
        self._event_markers.append(marker)
        self._event_markers.sort(key=lambda m: m.time)
        logger.debug(f"Added event marker '{label}' at {time:.1f}s")
        return marker

    def remove_event_marker(self, marker: EventMarker) -> bool:
        if marker in self._event_markers:
            self._event_markers.remove(marker)
            return True
        return False

    def jump_to_event(self, marker: Union[EventMarker, int]):
        """Pause playback, then seek to the marker (or marker index)."""
        if isinstance(marker, int):
            marker = self._event_markers[marker]
        self.clock.pause()
        self.clock.seek(marker.time)

    # ------------------------------------------------------------------
    # Per-tick pipeline
    # ------------------------------------------------------------------

    def _on_time(self, time: float):
        interpolated = self.timeline.interpolate(time)
        if interpolated is None:
            interpolated = {}

        for entity_id, position in interpolated.items():
            entity = self._entities.get(entity_id)
            if entity is not None:
                self._entities[entity_id] = entity.moved_to(position)

        self._publish(self.positions, time=time)

    def _publish(self, positions: Mapping[EntityId, Position], time: Optional[float] = None,
                 track_movement: bool = True):
        if track_movement:
            self.movement.update(self.clock.current_time if time is None else time, positions)

        if self.renderer is not None:
            self.renderer.update_positions(positions)

        self._metrics = compute_spatial_metrics(self.entities, self.settings.collision_threshold)

        if self.renderer is not None:
            trails = {entity_id: self.movement.trail(entity_id) for entity_id in positions}
            self.renderer.update_overlays(self._metrics, trails)

        for listener in list(self._metrics_listeners):
            listener(self._metrics)

    def _on_annotations(self, annotations: List[Annotation]):
        if self.renderer is not None:
            self.renderer.update_annotations(annotations)

    # ------------------------------------------------------------------
    # Analytics and advice
    # ------------------------------------------------------------------

    def metrics(self) -> SpatialMetrics:
        """Spatial metrics for the current positions"""
        return self._metrics

    def speed_of(self, entity_id: EntityId) -> float:
        return self.movement.speed(entity_id)

    def context_summary(self) -> str:
        return build_context_summary(
            self._metrics,
            home_formation=self.home_formation,
            away_formation=self.away_formation,
            phase=self.current_phase,
            current_time=self.clock.current_time,
        )

    def request_advice(self, service: AdvisoryService) -> str:
        """Ask the advisory service about the current state. Errors propagate."""
        summary = self.context_summary()
        logger.debug("Requesting tactical advice")
        return service.ask(summary)

    # ------------------------------------------------------------------
    # Import and persistence
    # ------------------------------------------------------------------

    def import_movement(self, source: Union[str, Path, list]) -> ImportedMovement:
        """
        Replace the timeline with recorded movement data.

        Args:
            source: Path to a JSON file, or already-decoded data

        Raises:
            ImportValidationError: If the data is rejected (timeline untouched)
        """
        if isinstance(source, (str, Path)):
            imported = load_movement_file(source)
        else:
            imported = parse_movement_data(source)

        entities = dict(self._entities)
        for info in imported.entities.values():
            if info.id in entities:
                continue
            team = info.team or (Team.AWAY if info.id > AWAY_ID_OFFSET else Team.HOME)
            entities[info.id] = Entity(
                id=info.id,
                team=team,
                role=info.role or Role.MIDFIELDER,
                position=Position(0.0, 0.0),
                name=info.name or "",
                number=info.number,
            )

        self.clock.stop()
        self.timeline.replace_keyframes(imported.keyframes)
        self._sync_duration()
        self._set_entities(list(entities.values()))
        self._on_time(self.clock.current_time)

        logger.info(
            f"Imported {len(imported.keyframes)} keyframes for {len(imported.entities)} entities"
        )
        return imported

    def _plan_metadata(self) -> Dict[str, Any]:
        serializer = PlanSerializer()
        return {
            "home_formation": self.home_formation,
            "away_formation": self.away_formation,
            "phase": self.current_phase.value if self.current_phase else None,
            "speed": self.clock.speed,
            "entities": [serializer.entity_to_dict(e) for e in self.entities],
        }

    def save_plan(self, repository, name: Optional[str] = None) -> int:
        """
        Persist the current plan.

        Returns:
            ID of the saved plan
        """
        return repository.save(
            self.timeline,
            self.annotations.annotations,
            self._plan_metadata(),
            name=name,
            event_markers=self._event_markers,
        )

    def load_plan(self, repository, plan_id: int):
        """
        Restore a saved plan and rewind to its start.

        Raises:
            PlanNotFoundError: If no plan has this ID
        """
        loaded = repository.load(plan_id)
        self._restore(
            loaded.timeline, loaded.annotations, loaded.event_markers, loaded.metadata
        )
        logger.info(f"Loaded plan {plan_id} '{loaded.name}'")

    def export_plan(self, output_dir: Optional[Path] = None, filename: Optional[str] = None) -> Path:
        return PlanSerializer().export_json(
            self.timeline,
            self.annotations.annotations,
            self._event_markers,
            self.entities,
            self._plan_metadata(),
            output_dir=output_dir,
            filename=filename,
        )

    def import_plan(self, path: Union[str, Path]):
        """
        Raises:
            ImportValidationError: If the file is not a plan export
        """
        plan = PlanSerializer().import_json(path)
        metadata = dict(plan["metadata"])
        if plan["entities"]:
            metadata["entities"] = [PlanSerializer.entity_to_dict(e) for e in plan["entities"]]
        self._restore(plan["timeline"], plan["annotations"], plan["event_markers"], metadata)

    def _restore(self, timeline: Timeline, annotations: List[Annotation],
                 event_markers: List[EventMarker], metadata: Dict[str, Any]):
        self.clock.stop()

        self.timeline = timeline
        self.annotations.load(annotations)
        self._event_markers = sorted(event_markers, key=lambda m: m.time)

        self.home_formation = metadata.get("home_formation")
        self.away_formation = metadata.get("away_formation")
        phase = metadata.get("phase")
        self.current_phase = Phase(phase) if phase else None
        if metadata.get("speed"):
            self.clock.set_speed(metadata["speed"])

        entity_data = metadata.get("entities")
        if entity_data:
            self._set_entities([PlanSerializer.entity_from_dict(e) for e in entity_data])

        self._sync_duration()
        self._on_time(self.clock.current_time)

    def release(self):
        """Teardown: stop scheduling frames and drop listeners."""
        self.clock.release()
        self._metrics_listeners.clear()
