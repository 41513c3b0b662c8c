"""Developer CLI for the emgcoach decision core.

Runs the four call surfaces (signal stream, rep zones, readiness, compliance)
plus the simulator and plan cost projection against JSON files, so fixtures
and recorded sessions can be replayed offline.
"""

import json
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
from loguru import logger
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.json import JSON
from rich.table import Table

from emgcoach.compliance import SetSnapshot, coach_asks_adapter, score_compliance
from emgcoach.config.settings import settings
from emgcoach.core.errors import InvalidInputError
from emgcoach.core.logger import setup_logger
from emgcoach.fatigue import RepFeature, classify_zone, find_fatigue_rep
from emgcoach.readiness import (
    BaselineMode,
    PlanBlock,
    ReadinessConfig,
    compute_readiness,
    project_plan_readiness,
)
from emgcoach.signal_state import (
    SignalSample,
    SignalStateMachine,
    SignalStateMachineConfig,
    StateChangeEvent,
)
from emgcoach.sim import SetSimOptions, SimExercise, SimScenario, simulate_rep_set

console = Console()

app = typer.Typer(
    name="emgcoach",
    help="emgcoach CLI - replay EMG sets through the decision core",
    add_completion=False,
)

_reps_adapter = TypeAdapter(list[RepFeature])
_samples_adapter = TypeAdapter(list[dict[str, float | None]])
_blocks_adapter = TypeAdapter(list[PlanBlock])

InputFile = Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="JSON input file")]
RawOption = Annotated[bool, typer.Option("--raw", help="Print plain JSON instead of rich output")]
OutputOption = Annotated[Path | None, typer.Option("--output", "-o", help="Also write the JSON result to this file")]


def _load_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def _emit(payload: Any, raw: bool, output: Path | None) -> None:
    """Print a JSON payload and optionally persist it."""
    text = json.dumps(payload, indent=None if raw else 2, default=str)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        logger.debug(f"Result written to {output}")
    if raw:
        typer.echo(text)
    else:
        console.print(JSON(text))


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Set up logging for every command."""
    setup_logger(
        level="DEBUG" if debug else settings.log_level,
        log_file=settings.log_file,
        serialize=settings.log_json,
    )


@app.command()
def readiness(
    input_file: InputFile,
    baseline_mode: BaselineMode = typer.Option(
        BaselineMode(settings.readiness_baseline_mode), "--baseline-mode", help="Baseline selection mode"
    ),
    set_impact: float = typer.Option(
        settings.readiness_set_impact, "--set-impact", min=0.0, max=1.0, help="Weight of this set against prior readiness"
    ),
    raw: RawOption = False,
    output: OutputOption = None,
) -> None:
    """Compute set readiness from rep peaks or an RMS stream with rep windows."""
    config = ReadinessConfig(baseline_mode=baseline_mode, set_impact=set_impact)
    try:
        result = compute_readiness(_load_json(input_file), config)
    except InvalidInputError as e:
        _fail(str(e))
    _emit(result.model_dump(mode="json"), raw, output)


@app.command()
def compliance(
    input_file: InputFile,
    raw: RawOption = False,
    output: OutputOption = None,
) -> None:
    """Score compliance from a file with ``asks``, ``before`` and ``after``."""
    data = _load_json(input_file)
    if not isinstance(data, dict):
        _fail("Expected a JSON object with asks, before and after")
    try:
        asks = coach_asks_adapter.validate_python(data.get("asks", []))
        before = SetSnapshot.model_validate(data["before"])
        after = SetSnapshot.model_validate(data["after"])
    except KeyError as e:
        _fail(f"Missing required key: {e}")
    except ValidationError as e:
        _fail(str(e))

    result = score_compliance(asks, before, after)
    if not raw:
        verdict = "[green]listened[/green]" if result.listened else "[red]did not listen[/red]"
        console.print(f"Score {result.score} - {verdict}")
        for reason in result.reasons:
            console.print(f"  • {reason}")
    _emit(result.model_dump(mode="json"), raw, output)


@app.command()
def zones(
    input_file: InputFile,
    raw: RawOption = False,
    output: OutputOption = None,
) -> None:
    """Classify the fatigue zone of a rep sequence and find the fatigue rep."""
    data = _load_json(input_file)
    if isinstance(data, dict):
        data = data.get("reps", [])
    try:
        reps = _reps_adapter.validate_python(data)
    except ValidationError as e:
        _fail(str(e))

    payload = {
        "zone": str(classify_zone(reps)),
        "fatigue_rep": find_fatigue_rep(reps),
        "reps": len(reps),
    }
    _emit(payload, raw, output)


@app.command()
def stream(
    input_file: InputFile,
    require_mdf: bool = typer.Option(
        settings.signal_require_mdf, "--require-mdf/--no-require-mdf", help="Require MDF corroboration for fall"
    ),
    ewma_alpha: float = typer.Option(0.25, "--ewma-alpha", min=0.0, max=1.0, help="Smoothing factor"),
    raw: RawOption = False,
    output: OutputOption = None,
) -> None:
    """Replay a sample stream through the signal state machine."""
    try:
        samples = _samples_adapter.validate_python(_load_json(input_file))
    except ValidationError as e:
        _fail(str(e))

    machine = SignalStateMachine(SignalStateMachineConfig(ewma_alpha=ewma_alpha, require_mdf_confirmation=require_mdf))
    events: list[StateChangeEvent] = []
    machine.on_state(events.append)

    for sample in samples:
        at_seconds = sample.get("at_seconds")
        rms_norm = sample.get("rms_norm")
        if at_seconds is None or rms_norm is None:
            logger.warning(f"Skipping sample without at_seconds/rms_norm: {sample}")
            continue
        machine.update(SignalSample(at_seconds=at_seconds, rms_norm=rms_norm, mdf_norm=sample.get("mdf_norm")))

    if not raw:
        table = Table(title="State transitions")
        table.add_column("t (s)", justify="right")
        table.add_column("from")
        table.add_column("to")
        table.add_column("confidence", justify="right")
        for event in events:
            table.add_row(f"{event.at_seconds:.2f}", str(event.previous_state), str(event.state), f"{event.confidence:.2f}")
        console.print(table)

    payload = {
        "final_state": str(machine.get_state()),
        "transitions": [
            {
                "state": str(event.state),
                "previous_state": str(event.previous_state),
                "at_seconds": event.at_seconds,
                "time_in_previous_state": event.time_in_previous_state,
                "confidence": event.confidence,
            }
            for event in events
        ],
    }
    _emit(payload, raw, output)


@app.command()
def simulate(
    scenario: SimScenario = typer.Option(SimScenario.JUST_RIGHT, "--scenario", help="Simulated set scenario"),
    exercise: SimExercise = typer.Option(SimExercise.GENERIC, "--exercise", help="Exercise ceiling profile"),
    reps: int = typer.Option(12, "--reps", min=1, help="Reps to simulate"),
    seed: int | None = typer.Option(settings.sim_default_seed, "--seed", help="Random seed"),
    raw: RawOption = False,
    output: OutputOption = None,
) -> None:
    """Simulate a set and classify it."""
    rep_set = simulate_rep_set(SetSimOptions(reps_target=reps, scenario=scenario, exercise=exercise), seed=seed)
    payload = {
        "scenario": str(scenario),
        "seed": seed,
        "zone": str(classify_zone(rep_set)),
        "fatigue_rep": find_fatigue_rep(rep_set),
        "reps": [rep.model_dump(mode="json") for rep in rep_set],
    }
    _emit(payload, raw, output)


@app.command("plan-cost")
def plan_cost(
    input_file: InputFile,
    readiness_before: float = typer.Option(60.0, "--readiness-before", help="Readiness at plan start"),
    raw: RawOption = False,
    output: OutputOption = None,
) -> None:
    """Project readiness after a planned list of blocks."""
    data = _load_json(input_file)
    if isinstance(data, dict):
        data = data.get("blocks", [])
    try:
        blocks = _blocks_adapter.validate_python(data)
    except ValidationError as e:
        _fail(str(e))
    _emit(project_plan_readiness(blocks, readiness_before).model_dump(mode="json"), raw, output)


if __name__ == "__main__":
    app()
