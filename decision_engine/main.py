"""
Decision Engine Entry Point.

    python -m decision_engine.main score input.json [--record]
    python -m decision_engine.main ingest payload.json [--tradingview] [--record]
    python -m decision_engine.main serve [--host HOST] [--port PORT]
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from decision_engine.config.settings import Config
from decision_engine.database.recorder import DecisionRecorder, SqlDecisionRecorder
from decision_engine.exceptions import CollaboratorError, InputError
from decision_engine.logging import setup_logging
from decision_engine.models.prediction import PredictionInput
from decision_engine.signals.intake.pipeline import SignalIntakePipeline
from decision_engine.signals.scoring.scorer import PredictionScorer

logger = logging.getLogger("decision_engine")


def _load_json(path: str) -> Any:
    with open(Path(path), encoding="utf-8") as f:
        return json.load(f)


async def _open_recorder(config: Config, record: bool) -> Optional[DecisionRecorder]:
    if not record:
        return None
    recorder = SqlDecisionRecorder.from_config(config)
    await recorder.connect()
    return recorder


async def run_score(config: Config, input_path: str, record: bool = False) -> int:
    try:
        prediction_input = PredictionInput.model_validate(_load_json(input_path))
    except PydanticValidationError as e:
        print(f"Invalid prediction input: {e}", file=sys.stderr)
        return 2

    recorder = await _open_recorder(config, record)
    try:
        scorer = PredictionScorer(recorder=recorder)
        result = await scorer.predict(prediction_input)
    except InputError as e:
        print(f"Cannot score {prediction_input.symbol}: {e}", file=sys.stderr)
        return 2
    finally:
        if recorder is not None:
            await recorder.disconnect()

    print(result.model_dump_json(indent=2))
    return 0


async def run_ingest(config: Config, payload_path: str, tradingview: bool = False, record: bool = False) -> int:
    payload = _load_json(payload_path)

    recorder = await _open_recorder(config, record)
    try:
        pipeline = SignalIntakePipeline.from_config(config, recorder=recorder)
        if tradingview:
            result = await pipeline.process_tradingview(payload)
        else:
            result = await pipeline.process(payload)
    finally:
        if recorder is not None:
            await recorder.disconnect()

    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.accepted else 1


def cmd_score(args: argparse.Namespace, config: Config) -> int:
    return asyncio.run(run_score(config, args.input, record=args.record))


def cmd_ingest(args: argparse.Namespace, config: Config) -> int:
    return asyncio.run(run_ingest(config, args.payload, tradingview=args.tradingview, record=args.record))


def cmd_serve(args: argparse.Namespace, config: Config) -> int:
    import uvicorn

    from decision_engine.api.dependencies import app_state
    from decision_engine.api.main import app

    app_state.initialize(config)
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="decision_engine", description="Signal scoring and decision engine")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_score = sub.add_parser("score", help="Score a prediction input JSON file.")
    p_score.add_argument("input", help="Path to a PredictionInput JSON file.")
    p_score.add_argument("--record", action="store_true", help="Persist the result to the decision store.")
    p_score.set_defaults(func=cmd_score)

    p_ingest = sub.add_parser("ingest", help="Run an inbound signal payload through intake.")
    p_ingest.add_argument("payload", help="Path to a signal payload JSON file.")
    p_ingest.add_argument("--tradingview", action="store_true", help="Payload is a raw TradingView alert.")
    p_ingest.add_argument("--record", action="store_true", help="Persist accepted signals to the decision store.")
    p_ingest.set_defaults(func=cmd_ingest)

    p_serve = sub.add_parser("serve", help="Run the HTTP API.")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=cmd_serve)

    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = Config()
    setup_logging(config)

    try:
        return args.func(args, config)
    except FileNotFoundError as e:
        print(f"File not found: {e.filename}", file=sys.stderr)
        return 2
    except json.JSONDecodeError as e:
        print(f"Invalid JSON: {e}", file=sys.stderr)
        return 2
    except CollaboratorError as e:
        logger.error(f"Critical error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
