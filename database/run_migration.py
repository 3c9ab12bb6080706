"""
Supabase 마이그레이션 실행 스크립트

Supabase Python 클라이언트는 DDL 실행을 지원하지 않으므로
누락된 테이블을 확인하고 Dashboard SQL Editor 에서 실행할 SQL 을 출력한다.
"""
import sys
from pathlib import Path
from typing import List

from loguru import logger
from supabase import Client

from database.store import COLLECTIONS

MIGRATION_FILE = Path(__file__).parent / "migrations" / "001_clubsphere_schema.sql"


def find_missing_tables(client: Client) -> List[str]:
    """존재하지 않는 컬렉션(테이블) 목록"""
    missing = []
    for table in COLLECTIONS:
        try:
            client.table(table).select("id").limit(1).execute()
        except Exception as e:
            if "does not exist" in str(e) or "relation" in str(e).lower():
                missing.append(table)
            else:
                logger.warning(f"{table} 테이블 확인 중 오류: {e}")
    return missing


def run_migration(client: Client) -> bool:
    """누락 테이블이 있으면 SQL 출력. 모두 존재하면 True"""
    if not MIGRATION_FILE.exists():
        logger.error(f"마이그레이션 파일을 찾을 수 없습니다: {MIGRATION_FILE}")
        return False

    missing = find_missing_tables(client)
    if not missing:
        logger.info("✅ 모든 테이블이 이미 존재합니다")
        return True

    logger.info(f"누락된 테이블: {', '.join(missing)}")
    logger.info("=" * 60)
    logger.info("Supabase Dashboard → SQL Editor 에서 아래 SQL을 실행해주세요:")
    logger.info("=" * 60)
    print("\n" + MIGRATION_FILE.read_text(encoding="utf-8") + "\n")
    return False


if __name__ == "__main__":
    from database.supabase_client import get_supabase_client

    logger.remove()
    logger.add(sys.stdout, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}")
    sys.exit(0 if run_migration(get_supabase_client()) else 1)
