"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from skillx.clients.gateway import Gateway, RetryPolicy
from skillx.clients.gemini_client import GeminiClient
from skillx.clients.llm_client import LLMClient
from skillx.config import AppConfig, load_config
from skillx.logging.cost_calculator import calculate_cost
from skillx.logging.models import UsageLog
from skillx.logging.usage_store import UsageStore
from skillx.models.skills import SkillStatus
from skillx.parsers.documents import load_job_description, load_resume
from skillx.parsers.image_scanner import scan_document
from skillx.pipeline.calibration import CalibrationCoach, calibration_verdict, score_quiz
from skillx.pipeline.interviewer import InterviewSimulator
from skillx.pipeline.mind_mapper import MindMapper
from skillx.pipeline.orchestrator import AnalysisOrchestrator, can_run
from skillx.pipeline.playground import Playground
from skillx.pipeline.state import AnalysisFailure, RunState
from skillx.pipeline.thinking_chat import ThinkingChat
from skillx.voice.audio import read_wav_frames, write_wav
from skillx.voice.live_coach import LiveCoachSession

app = typer.Typer(
    name="skillx",
    help="Career intelligence: skill gaps, learning roadmaps and practice tools",
    no_args_is_help=True,
)
console = Console()

STATUS_STYLES = {
    SkillStatus.FOUND: "green",
    SkillStatus.PARTIAL: "yellow",
    SkillStatus.MISSING: "red",
}


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _gateway(config: AppConfig) -> Gateway:
    return Gateway(RetryPolicy(
        max_retries=config.gateway.max_retries,
        initial_delay=config.gateway.initial_delay,
        timeout=config.gateway.timeout,
    ))


def _record_usage(config: AppConfig, llm: LLMClient | None, mode: str, started: float, **fields) -> None:
    if not config.usage.enabled:
        return
    tokens = llm.get_token_summary() if llm else {"input": 0, "output": 0, "calls": []}
    UsageStore(config.usage.resolved_db_path).save_log(UsageLog(
        mode=mode,
        elapsed_seconds=time.monotonic() - started,
        total_input_tokens=tokens["input"],
        total_output_tokens=tokens["output"],
        estimated_cost_usd=calculate_cost(tokens["calls"]),
        **fields,
    ))


def _fail(config: AppConfig, llm: LLMClient | None, mode: str, started: float, exc: Exception) -> None:
    failure = AnalysisFailure.from_exception(exc)
    _record_usage(
        config, llm, mode, started,
        success=False, error_kind=failure.kind.value, error_message=failure.detail,
    )
    console.print(Panel(failure.message, title="Protocol Interrupted", border_style="red"))
    raise typer.Exit(1)


def _skill_list(skills: str) -> list[str]:
    parsed = [s.strip().lower() for s in skills.split(",") if s.strip()]
    if not parsed:
        console.print("[red]Provide at least one skill (comma separated).[/red]")
        raise typer.Exit(1)
    return parsed


@app.command()
def analyze(
    jd: Path = typer.Option(..., "--jd", help="Job description file (PDF/DOCX/TXT/MD)"),
    resume: Path = typer.Option(..., "--resume", help="Resume file (PDF/DOCX/TXT/MD)"),
    hours: int = typer.Option(None, "--hours", min=1, max=12, help="Daily study hours for the roadmap"),
    strict: bool = typer.Option(False, "--strict", help="Fail the run on malformed model output"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the bundle as JSON"),
) -> None:
    """Extract skills, score resume gaps and build a learning roadmap."""
    for label, path in (("Job description", jd), ("Resume", resume)):
        if not path.exists():
            console.print(f"[red]{label} file not found: {path}[/red]")
            raise typer.Exit(1)

    config = load_config()
    jd_text = load_job_description(jd)
    resume_text = load_resume(resume)
    if not can_run(jd_text, resume_text):
        console.print("[yellow]Both the job description and the resume need content.[/yellow]")
        raise typer.Exit(1)

    llm = LLMClient(gateway=_gateway(config))
    orchestrator = AnalysisOrchestrator(
        llm,
        fast_model=config.llm.fast_model,
        roadmap_model=config.llm.fast_model,
        strict_decoding=strict or config.pipeline.strict_decoding,
        resume_char_limit=config.pipeline.resume_char_limit,
    )

    started = time.monotonic()
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Turbo analysis...", total=None)

        def on_phase(phase: str, detail: str) -> None:
            progress.update(task, description=detail)

        outcome = asyncio.run(orchestrator.run(
            jd_text,
            resume_text,
            hours or config.pipeline.hours_per_day,
            on_phase=on_phase,
        ))

    if outcome.state is RunState.FAILED:
        failure = outcome.failure
        _record_usage(
            config, llm, "analysis", started,
            run_id=outcome.run_id, success=False,
            error_kind=failure.kind.value, error_message=failure.detail,
        )
        console.print(Panel(failure.message, title="Protocol Interrupted", border_style="red"))
        raise typer.Exit(1)

    bundle = outcome.bundle
    _record_usage(
        config, llm, "analysis", started,
        run_id=bundle.run_id,
        skills_count=len(bundle.skills),
        match_score=bundle.match_score,
        roadmap_hours=bundle.roadmap.total_hours,
    )

    console.print(Panel(
        f"Market match: [bold]{bundle.match_score:g}%[/bold] | "
        f"Skills extracted: {len(bundle.skills)} | "
        f"Elapsed: {bundle.elapsed_seconds:.1f}s",
        title="Intelligence Dashboard",
    ))

    gaps = Table(title="Skill Gap Audit")
    gaps.add_column("Skill")
    gaps.add_column("Status")
    gaps.add_column("Evidence")
    gaps.add_column("Reasoning")
    for item in bundle.analysis:
        style = STATUS_STYLES[item.status]
        gaps.add_row(item.skill, f"[{style}]{item.status.value}[/{style}]", item.evidence, item.reasoning)
    console.print(gaps)

    roadmap = bundle.roadmap
    if roadmap.phases:
        plan = Table(title=f"Learning Journey: {roadmap.project_name or 'Growth Project'} ({roadmap.total_hours:g}h)")
        plan.add_column("#", justify="right")
        plan.add_column("Phase")
        plan.add_column("Hours", justify="right")
        plan.add_column("Topics")
        plan.add_column("Key deliverable")
        for i, phase in enumerate(roadmap.phases, 1):
            plan.add_row(
                str(i), phase.phase_name, f"{phase.estimated_hours:g}",
                ", ".join(phase.topics), phase.weekly_project,
            )
        console.print(plan)
    else:
        console.print("[yellow]No roadmap phases were generated.[/yellow]")

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "run_id": bundle.run_id,
            "skills": bundle.skills,
            "analysis": [item.model_dump(mode="json") for item in bundle.analysis],
            "match_score": bundle.match_score,
            "roadmap": bundle.roadmap.model_dump(mode="json", by_alias=True),
        }
        output.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        console.print(f"[green]Saved: {output}[/green]")


@app.command("mind-map")
def mind_map(
    skills: str = typer.Option(..., "--skills", "-s", help="Comma separated skills"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the Markdown to a file"),
) -> None:
    """Generate a hierarchical Markdown mind map of a skill set."""
    skill_list = _skill_list(skills)
    config = load_config()
    llm = LLMClient(gateway=_gateway(config))
    mapper = MindMapper(llm, model=config.llm.fast_model)
    started = time.monotonic()
    try:
        with console.status("Mapping skills..."):
            markdown = asyncio.run(mapper.generate(skill_list))
    except Exception as exc:
        _fail(config, llm, "mind_map", started, exc)
    _record_usage(config, llm, "mind_map", started)

    if output:
        output.write_text(markdown, encoding="utf-8")
        console.print(f"[green]Saved: {output}[/green]")
    else:
        console.print(Markdown(markdown))


@app.command()
def quiz(
    skill: str = typer.Argument(help="Skill to calibrate"),
    self_rating: int = typer.Option(..., "--self-rating", "-r", min=1, max=10, help="How do you rate yourself? (1-10)"),
) -> None:
    """Compare your self-rating with a short practical quiz."""
    config = load_config()
    llm = LLMClient(gateway=_gateway(config))
    coach = CalibrationCoach(llm, model=config.llm.fast_model)
    started = time.monotonic()
    try:
        with console.status("Generating intelligence quiz..."):
            generated = asyncio.run(coach.generate_quiz(skill))
    except Exception as exc:
        _fail(config, llm, "quiz", started, exc)
    _record_usage(config, llm, "quiz", started)

    if not generated.questions:
        console.print("[yellow]The quiz came back empty. Try again.[/yellow]")
        raise typer.Exit(1)

    console.print(f"\n[bold]{(generated.skill or skill).upper()} Practical Assessment[/bold]\n")
    answers: dict[int, str] = {}
    for i, question in enumerate(generated.questions):
        console.print(f"[bold]Q{i + 1}: {question.question}[/bold]")
        for option in question.options:
            console.print(f"  {option.id}) {option.text}")
        answers[i] = typer.prompt("Answer").strip()

    actual = score_quiz(generated, answers)
    verdict = calibration_verdict(self_rating, actual)
    console.print(Panel(
        f"Self rating: {self_rating} | Measured: {actual}\n[bold]{verdict.value}[/bold]",
        title="Calibration",
    ))
    for i, question in enumerate(generated.questions):
        mark = "[green]correct[/green]" if answers.get(i) == question.correct else f"[red]answer: {question.correct}[/red]"
        console.print(f"Q{i + 1} {mark} - {question.explanation}")


@app.command("playground")
def playground_cmd(
    mode: str = typer.Argument(help="architecture | challenge | scenario"),
    skills: str = typer.Option(..., "--skills", "-s", help="Comma separated skills"),
    project: str = typer.Option("General Growth Project", "--project", "-p", help="Project to architect"),
) -> None:
    """Practice with architecture blueprints, coding challenges or crisis drills."""
    if mode not in ("architecture", "challenge", "scenario"):
        console.print(f"[red]Unknown mode: {mode}[/red]")
        raise typer.Exit(1)
    skill_list = _skill_list(skills)
    config = load_config()
    llm = LLMClient(gateway=_gateway(config))
    lab = Playground(llm, model=config.llm.fast_model)
    started = time.monotonic()

    try:
        if mode == "architecture":
            with console.status("Designing..."):
                blueprint = asyncio.run(lab.design_architecture(project, skill_list))
            console.print(Panel(blueprint.overview, title=project))
            console.print(Panel(blueprint.mermaid_code or "graph TD\n  Start --> End", title="Mermaid"))
            for endpoint in blueprint.api_endpoints:
                console.print(f"  - {endpoint}")
            for decision in blueprint.tech_stack_decisions:
                console.print(f"  * {decision}")
        elif mode == "challenge":
            with console.status("Generating..."):
                challenge = asyncio.run(lab.generate_challenge(skill_list))
            console.print(Panel(challenge.description, title=challenge.title))
            console.print(Markdown(f"```\n{challenge.boilerplate}\n```"))
        else:
            with console.status("Initializing..."):
                scenario = asyncio.run(lab.generate_scenario(skill_list))
            console.print(Panel(f"{scenario.description}\n\n[bold]Task:[/bold] {scenario.task}", title=scenario.title))
            plan = typer.prompt("Explain your step-by-step plan to fix the outage")
            with console.status("Analyzing..."):
                feedback = asyncio.run(lab.review_scenario(scenario, plan))
            console.print(Markdown(feedback))
    except Exception as exc:
        _fail(config, llm, "playground", started, exc)
    _record_usage(config, llm, "playground", started)


@app.command()
def interview(
    difficulty: str = typer.Option("Medium", "--difficulty", "-d", help="Easy | Medium | Hard"),
) -> None:
    """Run a technical interview in the terminal (empty answer to finish)."""
    config = load_config()
    llm = LLMClient(gateway=_gateway(config))
    simulator = InterviewSimulator(llm, model=config.llm.fast_model, difficulty=difficulty)
    started = time.monotonic()
    console.print(f"[bold]Interviewer:[/bold] {simulator.messages[-1].content}")

    while True:
        answer = typer.prompt("You", default="", show_default=False)
        if not answer.strip():
            break
        try:
            with console.status("Thinking..."):
                reply = asyncio.run(simulator.respond(answer))
        except Exception as exc:
            _fail(config, llm, "interview", started, exc)
        console.print(f"[bold]Interviewer[/bold] [dim]({simulator.difficulty})[/dim]: {reply}")

    _record_usage(config, llm, "interview", started)


@app.command()
def transcribe(
    audio: Path = typer.Argument(help="Recorded answer (wav/mp3/webm...)"),
    mime_type: str = typer.Option("audio/wav", "--mime-type", help="MIME type of the recording"),
) -> None:
    """Transcribe a spoken interview answer."""
    if not audio.exists():
        console.print(f"[red]File not found: {audio}[/red]")
        raise typer.Exit(1)
    config = load_config()
    gemini = GeminiClient(gateway=_gateway(config))
    started = time.monotonic()
    try:
        with console.status("Transcribing your voice..."):
            text = asyncio.run(gemini.transcribe(
                audio.read_bytes(), mime_type=mime_type, model=config.voice.transcription_model,
            ))
    except Exception as exc:
        _fail(config, None, "transcribe", started, exc)
    _record_usage(config, None, "transcribe", started)
    console.print(text or "[yellow]Nothing was heard.[/yellow]")


@app.command()
def think(question: str = typer.Argument(help="A complex career or technical query")) -> None:
    """Ask the deep reasoning engine."""
    config = load_config()
    llm = LLMClient(gateway=_gateway(config))
    chat = ThinkingChat(llm, model=config.llm.reasoning_model, budget_tokens=config.llm.thinking_budget)
    started = time.monotonic()
    try:
        with console.status("Reasoning..."):
            answer = asyncio.run(chat.ask(question))
    except Exception as exc:
        _fail(config, llm, "think", started, exc)
    _record_usage(config, llm, "think", started)
    console.print(Markdown(answer))


@app.command()
def scan(file: Path = typer.Argument(help="Resume image or PDF")) -> None:
    """Review the visual structure of a resume image or scanned PDF."""
    if not file.exists():
        console.print(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)
    config = load_config()
    llm = LLMClient(gateway=_gateway(config))
    started = time.monotonic()
    try:
        with console.status("Vision engine running..."):
            report = asyncio.run(scan_document(llm, file.read_bytes(), file.name))
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    except Exception as exc:
        _fail(config, llm, "scan", started, exc)
    _record_usage(config, llm, "scan", started)
    console.print(Panel(Markdown(report), title="Intelligence Report"))


@app.command()
def voice(
    audio: Path = typer.Argument(help="Mono 16-bit WAV at the configured input rate"),
    reply: Path = typer.Option(None, "--reply", help="Save the coach's spoken reply as WAV"),
) -> None:
    """Talk to the live voice coach using a recorded WAV file."""
    if not audio.exists():
        console.print(f"[red]File not found: {audio}[/red]")
        raise typer.Exit(1)
    config = load_config()
    frames = read_wav_frames(audio, expected_rate=config.voice.input_sample_rate)
    played: list[bytes] = []
    session = LiveCoachSession(
        GeminiClient(),
        config.voice,
        on_audio=lambda chunk: played.append(chunk.pcm),
        on_interrupt=lambda _: played.clear(),
    )

    async def _microphone():
        for frame in frames:
            yield frame

    started = time.monotonic()
    try:
        with console.status("Session active..."):
            history = asyncio.run(session.run(_microphone()))
    except Exception as exc:
        _fail(config, None, "voice", started, exc)
    _record_usage(config, None, "voice", started)

    for entry in history:
        who = "You" if entry.role == "user" else "Coach"
        console.print(f"[bold]{who}:[/bold] {entry.text}")
    if reply and played:
        write_wav(reply, b"".join(played), config.voice.output_sample_rate)
        console.print(f"[green]Saved: {reply}[/green]")


@app.command()
def stats() -> None:
    """Show this month's usage and estimated cost."""
    config = load_config()
    store = UsageStore(config.usage.resolved_db_path)
    monthly = store.get_monthly_stats()
    avg = monthly["avg_match_score"]
    console.print(Panel(
        f"Runs: {monthly['total_runs']} | Success: {monthly['success_rate']:.0f}% | "
        f"Throttled: {monthly['rate_limited_runs']}\n"
        f"Tokens: {monthly['total_input_tokens']} in / {monthly['total_output_tokens']} out\n"
        f"Cost: ${monthly['total_cost_usd']:.4f} (all time ${store.get_total_cost():.4f})\n"
        f"Average match score: {avg if avg is not None else '-'}",
        title=f"Usage {monthly['month']}",
    ))


if __name__ == "__main__":
    app()
