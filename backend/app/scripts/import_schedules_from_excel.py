"""Importa agendamentos de uma planilha Excel usando as mesmas regras da API."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Lê uma planilha de agendamentos (mesmo layout do modelo de importação) "
            "e cria ou atualiza os registros no banco de dados."
        )
    )
    parser.add_argument("source", type=Path, help="Caminho da planilha Excel")
    parser.add_argument(
        "--sheet",
        dest="sheet",
        default=0,
        help="Nome ou índice da aba a ser lida (padrão: primeira aba)",
    )
    parser.add_argument(
        "--update",
        action="store_true",
        help="Atualiza agendamentos existentes pelo chassi em vez de criar novos",
    )
    parser.add_argument(
        "--database-url",
        dest="database_url",
        help="URL do banco de dados; tem precedência sobre DATABASE_URL (padrão: SQLite local)",
    )
    return parser.parse_args(argv)


def load_rows(workbook: Path, sheet: Any = 0) -> List[Dict[str, Any]]:
    """Return the sheet as a list of row mappings with blank cells as ``None``."""

    frame = pd.read_excel(workbook, sheet_name=sheet)
    frame = frame.dropna(how="all")
    frame = frame.astype(object).where(pd.notna(frame), None)
    return frame.to_dict(orient="records")


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url

    from ..database import session_scope
    from ..services import BatchRejectedError, ScheduleService

    sheet = int(args.sheet) if str(args.sheet).isdigit() else args.sheet
    rows = load_rows(args.source, sheet)
    print(f"{len(rows)} linha(s) lida(s) de {args.source.as_posix()}")

    operation = ScheduleService.bulk_update if args.update else ScheduleService.bulk_create
    try:
        with session_scope() as session:
            result = operation(session, rows)
    except BatchRejectedError as exc:
        print(exc.message)
        for detail in exc.details:
            print(f" - {detail}")
        return 1

    verb = "modificado(s)" if args.update else "criado(s)"
    print(f"{result.count} agendamento(s) {verb} com sucesso")
    for message in result.failure_messages():
        print(f" ! {message}")
    return 2 if result.partial else 0


if __name__ == "__main__":
    raise SystemExit(main())
