"""Command-line interface for logreg_workflow."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from ..config import WorkflowConfig, load_workflow_config
from ..data import load_dataset, read_table, split_dataset, write_split
from ..errors import WorkflowError
from ..evaluation import format_report
from ..models.logreg import load_model, predict_labels, select_features
from ..pipeline import evaluate_saved_model, run_workflow
from ..utils import get_logger, json_log

app = typer.Typer(help='Logistic-regression workflow CLI', no_args_is_help=True)

log = get_logger(__name__)


def _resolve_path(value: Path | None) -> Path | None:
    if value is None:
        return None
    return Path(value).expanduser().resolve()


def _apply_overrides(
    config: WorkflowConfig,
    data: Path | None = None,
    model_out: Path | None = None,
) -> WorkflowConfig:
    if data is not None:
        config = replace(config, data=replace(config.data, path=_resolve_path(data)))
    if model_out is not None:
        config = replace(
            config,
            artifacts=replace(config.artifacts, model_path=_resolve_path(model_out)),
        )
    return config


def _fail(exc: WorkflowError) -> NoReturn:
    typer.echo(f'Error [{exc.stage}]: {exc}', err=True)
    raise typer.Exit(code=1)


@app.command('run')
def run(
    config: Annotated[
        Path,
        typer.Option(
            '--config',
            '-c',
            exists=True,
            readable=True,
            help='Path to workflow configuration YAML.',
        ),
    ] = Path('configs/workflow.yaml'),
    data: Annotated[
        Path | None,
        typer.Option('--data', '-d', help='Optional override for data.path.'),
    ] = None,
    model_out: Annotated[
        Path | None,
        typer.Option('--model-out', '-m', help='Optional override for artifacts.model_path.'),
    ] = None,
) -> None:
    """Split, train, predict, evaluate and (optionally) save the model."""
    log.info(json_log('cli.run.start', component='cli', config=str(config)))
    try:
        cfg = load_workflow_config(config)
    except ValueError as exc:
        typer.echo(f'Error [config]: {exc}', err=True)
        raise typer.Exit(code=1) from exc
    cfg = _apply_overrides(cfg, data=data, model_out=model_out)

    try:
        result = run_workflow(cfg)
    except WorkflowError as exc:
        _fail(exc)

    if not result.model.converged:
        typer.echo(
            f'Warning: solver did not converge within max_iter={cfg.classifier.max_iter}',
            err=True,
        )
    typer.echo(format_report(result.report))
    if result.model_path is not None:
        typer.echo(f'Model saved to: {result.model_path}')
    log.info(json_log('cli.run.completed', component='cli'))


@app.command('split')
def split(
    input_csv: Annotated[
        Path,
        typer.Option('--input', '-i', exists=True, readable=True, help='Labeled CSV to split.'),
    ],
    output_dir: Annotated[
        Path,
        typer.Option('--output-dir', '-o', help='Directory for train/ and test/ CSVs.'),
    ],
    label_column: Annotated[
        str,
        typer.Option('--label-column', '-l', help='Label column to stratify on.'),
    ] = 'label',
    test_size: Annotated[
        float,
        typer.Option('--test-size', help='Holdout fraction (default: 0.2).'),
    ] = 0.2,
    seed: Annotated[
        int,
        typer.Option('--seed', help='Random seed (default: 42).'),
    ] = 42,
) -> None:
    """Write a stratified train/test split of a labeled CSV."""
    try:
        dataset = load_dataset(input_csv, label_column=label_column)
        result = split_dataset(dataset, test_size=test_size, random_state=seed)
    except WorkflowError as exc:
        _fail(exc)

    train_path, test_path = write_split(result, output_dir, label_column=label_column)
    typer.echo(f'Train ({len(result.x_train)} rows): {train_path}')
    typer.echo(f'Test ({len(result.x_test)} rows): {test_path}')


@app.command('evaluate')
def evaluate_model(
    model: Annotated[
        Path,
        typer.Option('--model', '-m', help='Saved model file.'),
    ],
    input_csv: Annotated[
        Path,
        typer.Option('--input', '-i', exists=True, readable=True, help='Labeled CSV to score.'),
    ],
    label_column: Annotated[
        str,
        typer.Option('--label-column', '-l', help='Label column name.'),
    ] = 'label',
) -> None:
    """Evaluate a saved model on labeled data without retraining."""
    try:
        report = evaluate_saved_model(model, input_csv, label_column=label_column)
    except WorkflowError as exc:
        _fail(exc)
    typer.echo(format_report(report))


@app.command('predict')
def predict(
    model: Annotated[
        Path,
        typer.Option('--model', '-m', help='Saved model file.'),
    ],
    input_csv: Annotated[
        Path,
        typer.Option('--input', '-i', exists=True, readable=True, help='CSV with feature columns.'),
    ],
    output: Annotated[
        Path,
        typer.Option('--output', '-o', help='Output CSV (input rows plus predictions).'),
    ],
    column: Annotated[
        str,
        typer.Option('--column', help='Name of the prediction column.'),
    ] = 'prediction',
) -> None:
    """Predict labels for each row of a CSV with a saved model."""
    try:
        fitted = load_model(model)
        frame = read_table(input_csv, stage='predict')
        predictions = predict_labels(fitted, select_features(fitted, frame))
    except WorkflowError as exc:
        _fail(exc)

    result = frame.assign(**{column: predictions})
    output.parent.mkdir(parents=True, exist_ok=True)
    result.to_csv(output, index=False)
    log.info(json_log('cli.predict.completed', component='cli', output=str(output), rows=len(result)))
    typer.echo(f'Predictions written to: {output}')


if __name__ == '__main__':
    app()
