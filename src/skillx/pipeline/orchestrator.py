"""Analysis orchestrator - extracts skills, then scores gaps and plans a roadmap."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from skillx.clients.llm_client import LLMClient
from skillx.pipeline.gap_analyst import GapAnalyst
from skillx.pipeline.roadmap_planner import RoadmapPlanner
from skillx.pipeline.skill_extractor import SkillExtractor
from skillx.pipeline.state import (
    AnalysisBundle,
    AnalysisFailure,
    AnalysisStore,
    RunState,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOutcome:
    """Terminal result of one orchestration run."""

    run_id: int
    state: RunState
    bundle: AnalysisBundle | None = None
    failure: AnalysisFailure | None = None
    published: bool = True  # False when a newer run superseded this one


def can_run(job_description: str, resume: str) -> bool:
    return bool(job_description and job_description.strip()) and bool(resume and resume.strip())


class AnalysisOrchestrator:
    """Runs skill extraction, then gap analysis and roadmap generation in parallel."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        store: AnalysisStore | None = None,
        fast_model: str = "claude-haiku-4-5-20251001",
        roadmap_model: str = "claude-haiku-4-5-20251001",
        strict_decoding: bool = False,
        resume_char_limit: int = 8000,
    ):
        self.store = store or AnalysisStore()
        self.skill_extractor = SkillExtractor(llm, model=fast_model, strict=strict_decoding)
        self.gap_analyst = GapAnalyst(
            llm,
            model=fast_model,
            strict=strict_decoding,
            resume_char_limit=resume_char_limit,
        )
        self.roadmap_planner = RoadmapPlanner(llm, model=roadmap_model, strict=strict_decoding)

    async def run(
        self,
        job_description: str,
        resume: str,
        hours_per_day: int = 2,
        *,
        on_phase: Callable[[str, str], None] | None = None,
    ) -> RunOutcome | None:
        """Run the full analysis and publish the bundle to the store.

        Args:
            job_description: Target job description text.
            resume: Applicant's resume as plain text.
            hours_per_day: Daily study budget for the roadmap.
            on_phase: Optional callback(phase_name, detail) for progress.

        Returns:
            The run outcome, or None when either input is blank (nothing
            starts and the store is left untouched).
        """
        if not can_run(job_description, resume):
            logger.debug("Analysis not started: job description and resume are both required")
            return None
        if hours_per_day <= 0:
            raise ValueError(f"hours_per_day must be positive, got {hours_per_day}")

        def _notify(phase: str, detail: str = ""):
            if on_phase:
                on_phase(phase, detail)

        start = time.monotonic()
        run_id = self.store.begin_run()
        logger.info("Analysis run %d started", run_id)

        try:
            # --- Step 1: skills gate everything downstream ---
            _notify("extracting", "Extracting skills from the job description")
            skills = await self.skill_extractor.extract(job_description)

            # --- Step 2: gap analysis and roadmap are independent ---
            self.store.advance(run_id, RunState.ANALYZING)
            _notify("analyzing", f"Scoring {len(skills)} skills and planning roadmap")
            gaps, roadmap = await asyncio.gather(
                self.gap_analyst.analyze(resume, job_description, skills),
                self.roadmap_planner.plan(skills, hours_per_day),
            )
        except Exception as exc:
            failure = AnalysisFailure.from_exception(exc)
            logger.error("Analysis run %d failed (%s)", run_id, failure.kind.value, exc_info=True)
            published = self.store.fail(run_id, failure)
            if published:
                _notify("failed", failure.message)
            return RunOutcome(
                run_id=run_id,
                state=RunState.FAILED,
                failure=failure,
                published=published,
            )

        elapsed = time.monotonic() - start
        bundle = AnalysisBundle(
            skills=skills,
            analysis=list(gaps.analysis),
            match_score=gaps.match_score,
            roadmap=roadmap,
            run_id=run_id,
            elapsed_seconds=elapsed,
        )
        published = self.store.publish(run_id, bundle)
        if published:
            _notify("done", f"Match score {gaps.match_score:g}, {elapsed:.1f}s")
        logger.info("Analysis run %d finished in %.1fs", run_id, elapsed)

        return RunOutcome(
            run_id=run_id,
            state=RunState.SUCCEEDED,
            bundle=bundle,
            published=published,
        )
