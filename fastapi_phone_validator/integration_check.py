from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from app.core.phone import normalize_number
from app.services import bulk_service, export_service, number_verification_service, upload_service


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="번호 검증 API 연동 점검 스크립트")
    parser.add_argument("--number", help="단건 번호 검증")
    parser.add_argument("--numbers", nargs="+", metavar="NUMBER", help="여러 번호 일괄 검증")
    parser.add_argument("--file", type=Path, help="csv/xlsx 파일 일괄 처리")
    parser.add_argument("--out", type=Path, help="--file 처리 결과 저장 경로")
    args = parser.parse_args(argv)

    if args.number:
        cleaned = normalize_number(args.number)
        if not cleaned:
            print("번호 형식 오류:", args.number)
        else:
            result = asyncio.run(number_verification_service.validate_number(cleaned))
            print("검증 결과:", result.number, result.valid, result.line_type, result.carrier)

    if args.numbers:
        results = asyncio.run(number_verification_service.validate_numbers(args.numbers))
        for result in results:
            print(result.input_number, result.success, result.line_type, result.error or "")

    if args.file:
        parsed = upload_service.parse_upload(args.file.name, args.file.read_bytes())
        processed = asyncio.run(bulk_service.process_rows(parsed.rows, parsed.columns))
        stats = processed.statistics
        print("후보 컬럼:", ", ".join(processed.candidate_columns) or "-")
        print(
            f"total={stats.total} mobile={stats.mobile} "
            f"landline={stats.landline} invalid={stats.invalid}"
        )
        if processed.warning:
            print("경고:", processed.warning)
        out_path = args.out or args.file.with_name(f"processed_{args.file.name}")
        out_path.write_bytes(
            export_service.build_export(args.file.name, processed.columns, processed.rows)
        )
        print("결과 파일:", out_path)


if __name__ == "__main__":
    main()
