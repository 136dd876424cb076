"""
Example script for submitting a loan application from the command line.

This script reads an ID document and an income proof from disk, runs them
through the Decision Agent and optionally applies a credit officer override.

Example:
    python examples/submit_application.py \\
        --name "A. Kumar" --email a.kumar@example.com --amount 50000 \\
        --id-document docs/pan.png --income-proof docs/salary_slip.pdf \\
        --override AUTO_APPROVE --comment "verified manually"
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from agents.decision_agent import DecisionAgent
from models.loan_application import DocumentType
from utils.config import config
from utils.logging_config import setup_logging
from workflows import (
    ApplicationStore,
    ApplicationWorkflow,
    DocumentCollector,
    LoanWorkflowError,
)


def print_application(application) -> None:
    """Print the decision and audit trail of an application."""
    result = application.result
    print(f"Application ID: {application.id}")
    print(f"Status:         {application.status.value}")
    print(f"Decision:       {result.decision.value}")
    print(f"Explanation:    {result.explanation}")
    print(f"Feedback:       {result.user_feedback}")
    if result.missing_data:
        print("Missing data:")
        for item in result.missing_data:
            print(f"  - {item}")
    print("Validations:")
    for validation in result.validations:
        status = "✓" if validation.is_valid else "✗"
        print(f"  {status} {validation.field_name}: {validation.message}")
    print("Audit trail:")
    for entry in application.audit_trail:
        print(f"  {entry.timestamp.isoformat()} {entry.action.value} by {entry.actor.value}: {entry.comment or ''}")


def main():
    """Submit one application and print the outcome."""
    parser = argparse.ArgumentParser(description="Submit a loan application")
    parser.add_argument("--name", required=True, help="Applicant's full name")
    parser.add_argument("--email", required=True, help="Contact email")
    parser.add_argument("--phone", default="", help="Contact phone number")
    parser.add_argument("--amount", type=float, required=True, help="Requested loan amount")
    parser.add_argument("--id-document", type=Path, required=True, help="Government issued ID (image or PDF)")
    parser.add_argument("--income-proof", type=Path, required=True, help="Salary slip or ITR-V (image or PDF)")
    parser.add_argument("--model", default=None, help=f"LLM model (default: {config.PRIMARY_MODEL})")
    parser.add_argument("--override", default=None, help="Apply a manual decision after processing")
    parser.add_argument("--comment", default="", help="Reason for the manual override")
    parser.add_argument("--persist", action="store_true", help="Save the application under outputs/applications")
    args = parser.parse_args()

    setup_logging(file_output=False)

    collector = DocumentCollector()
    for doc_type, path in ((DocumentType.ID, args.id_document), (DocumentType.PAYSTUB, args.income_proof)):
        collector.add_file(doc_type, path.name, path.read_bytes())

    store = ApplicationStore.load(config.applications_dir()) if args.persist else ApplicationStore()
    workflow = ApplicationWorkflow(provider=DecisionAgent(model=args.model), store=store)

    print("=" * 60)
    try:
        application = workflow.submit(
            {
                "full_name": args.name,
                "email": args.email,
                "phone": args.phone,
                "requested_amount": args.amount,
            },
            collector,
        )
        if args.override:
            application = workflow.override(application.id, args.override, args.comment)
    except LoanWorkflowError as e:
        print(f"✗ {e}")
        return 1

    print_application(application)
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
