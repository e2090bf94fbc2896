"""
Vault 관리 CLI

실행 방법:
    python -m vault init                 # 스키마 + 런타임 설정 생성
    python -m vault status               # 합계/한도/등록 자산 출력
    python -m vault stranded --limit 20  # Cap 초과로 남은 Swap 결과 목록

자산 이동/거래소 연동 없이 DB만 사용한다.
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import load_settings
from core.ledger.store import BalanceLedger
from core.logging import setup_logging
from core.registry.asset_registry import AssetRegistry
from core.storage.config_store import ConfigStore
from core.types import OperationKind

logger = logging.getLogger("vault")


async def cmd_init(db: SQLiteAdapter, settings) -> dict:
    """스키마 + 런타임 설정 생성"""
    config = await ConfigStore(db).ensure_vault_config(settings)
    return {"db_path": str(db.db_path), **config.to_dict()}


async def cmd_status(db: SQLiteAdapter, settings) -> dict:
    """Vault 현황"""
    config = await ConfigStore(db).get_vault_config()
    total = await BalanceLedger(db).total_valued()
    assets = await AssetRegistry(db).list_all()
    return {
        "mode": settings.mode.value,
        "stable_asset": settings.stable_asset,
        "total_valued": str(total),
        "headroom": str(max(0, config.bank_cap - total)),
        **config.to_dict(),
        "assets": [
            {
                "asset": a.asset,
                "accepted": a.accepted,
                "price_reference": a.price_reference,
                "decimal_override": a.decimal_override,
            }
            for a in assets
        ],
    }


async def cmd_stranded(db: SQLiteAdapter, settings, limit: int) -> list:
    """Cap 초과로 계정에 반영되지 못한 Swap 결과"""
    entries = await BalanceLedger(db).list_entries(
        kind=OperationKind.SWAP_STRANDED, limit=limit
    )
    return [e.to_dict() for e in entries]


async def main(args: argparse.Namespace) -> None:
    """CLI 실행"""
    settings = load_settings(Path(args.config) if args.config else None)
    db_path = args.db or settings.db_path

    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)

        if args.command == "init":
            result = await cmd_init(db, settings)
            logger.info("Vault 초기화 완료")
        elif args.command == "status":
            await ConfigStore(db).ensure_vault_config(settings)
            result = await cmd_status(db, settings)
        else:
            result = await cmd_stranded(db, settings, args.limit)

    print(json.dumps(result, ensure_ascii=False, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m vault", description="Vault 관리 CLI")
    parser.add_argument("--config", help="vault.yaml 경로 (기본: config/vault.yaml)")
    parser.add_argument("--db", help="DB 경로 (기본: 모드별 경로)")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init", help="스키마 + 런타임 설정 생성")
    sub.add_parser("status", help="Vault 현황 출력")
    stranded = sub.add_parser("stranded", help="Cap 초과로 남은 Swap 결과 목록")
    stranded.add_argument("--limit", type=int, default=100)
    return parser


if __name__ == "__main__":
    setup_logging("vault")
    asyncio.run(main(build_parser().parse_args()))
