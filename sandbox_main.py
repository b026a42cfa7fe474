#!/usr/bin/env python3
"""
Sandbox entrypoint for security-audit.
Reads files and an optional package.json from stdin JSON, outputs the audit as JSON to stdout.

Input (stdin JSON):
{
  "projectId": "proj_123",
  "files": [{"path": "app/api/users/route.ts", "content": "..."}],
  "packageJson": "{\"dependencies\": {\"lodash\": \"4.17.20\"}}",  // optional
  "mode": "partial",  // "partial" (default) or "full"
  "export": "markdown"  // optional, full mode only
}
"""

import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from pydantic import ValidationError

from security_audit.config import LOG_LEVEL
from security_audit.disclosure import to_full_audit, to_partial_scan
from security_audit.engine import run_scan
from security_audit.models import AuditRequest
from security_audit.report import export_markdown

logging.basicConfig(level=LOG_LEVEL, stream=sys.stderr)
logger = logging.getLogger(__name__)


def main() -> None:
    try:
        input_data = json.load(sys.stdin)
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON input: {e}"}))
        sys.exit(1)

    try:
        request = AuditRequest.model_validate(input_data)
    except ValidationError as e:
        print(json.dumps({"error": "Invalid request", "details": e.errors(include_url=False)}, default=str))
        sys.exit(1)

    logger.info(f"Auditing {len(request.files)} files for {request.project_id} ({request.mode})")
    _, findings = run_scan(request.files, request.package_json)

    if request.mode == "partial":
        print(json.dumps(to_partial_scan(findings).model_dump(mode="json", by_alias=True)))
        return

    audit = to_full_audit(findings, request.project_id, audit_id=request.audit_id)
    output = audit.model_dump(mode="json", by_alias=True)
    if request.export == "markdown":
        output = {"audit": output, "markdown": export_markdown(audit)}
    print(json.dumps(output))


if __name__ == "__main__":
    main()
