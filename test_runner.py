#!/usr/bin/env python3
"""
Automated testing for office hours normalization
Uses normalizers + ground_truth.json
- Case kinds:
  * parse:  free-text time string -> parse result
  * slots:  days + time string + location -> ordered time slots
  * status: extracted record -> result status label
  * record: extracted record -> contact hour record batch status
- Structured results (parse results, slots) must match exactly
- Status labels are compared case- and whitespace-insensitively
Prints results to terminal and saves to test_results.json

Exit codes:
  0 = success (all cases ran, results saved)
  2 = missing ground truth file
  3 = unreadable ground truth file
"""
import os
import sys
import json
import argparse
import logging
from collections import defaultdict

# Add repo root to path
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "."))
if REPO_ROOT not in sys.path:
    sys.path.append(REPO_ROOT)

from config import Config
from normalizers.time_parser import parse_time_string
from normalizers.time_slots import TimeSlotBuilder
from normalizers.result_status import determine_result_status
from normalizers.contact_hours import build_contact_hour_record

SUPPORTED_KINDS = ("parse", "slots", "status", "record")

logger = logging.getLogger('normalizer.test_runner')


# ======================================================================
# COMPARISON HELPERS
# ======================================================================

def norm(s):
    if s is None:
        return ""
    return " ".join(str(s).strip().lower().split())


def compare_status(gt, pred):
    """Labels match ignoring case, spacing and "_" vs " "."""
    return norm(str(gt).replace("_", " ")) == norm(str(pred).replace("_", " "))


# ======================================================================
# CASE RUNNERS
# ======================================================================

def make_builder():
    """Slot builder using the location and comment defaults from Config."""
    return TimeSlotBuilder(
        default_location=Config.DEFAULT_LOCATION,
        default_comments=Config.DEFAULT_COMMENTS,
    )


def run_parse_case(case_input, builder):
    return parse_time_string(case_input.get("text")).to_dict()


def run_slots_case(case_input, builder):
    slots = builder.build(
        case_input.get("days") or [],
        case_input.get("times"),
        case_input.get("location"),
        case_input.get("comments"),
    )
    return [slot.to_dict() for slot in slots]


def run_status_case(case_input, builder):
    return determine_result_status(case_input).value


def run_record_case(case_input, builder):
    record = build_contact_hour_record(
        case_input, case_input.get("contactId", ""),
        source=case_input.get("validatedBy") or Config.DEFAULT_SOURCE,
        builder=builder,
    )
    return record.status.value


RUNNERS = {
    "parse": (run_parse_case, lambda gt, pred: gt == pred),
    "slots": (run_slots_case, lambda gt, pred: gt == pred),
    "status": (run_status_case, compare_status),
    "record": (run_record_case, compare_status),
}


def run_case(case, builder):
    """
    Run one ground truth case.

    Returns:
        dict: name, kind, expected, predicted and match. Unknown kinds and
        runtime errors give match False with an error message.
    """
    name = case.get("name", "")
    kind = case.get("kind", "")
    expected = case.get("expected")
    detail = {"name": name, "kind": kind, "expected": expected, "predicted": None, "match": False}

    if kind not in RUNNERS:
        detail["error"] = f"Unknown case kind: {kind!r}"
        return detail

    runner, compare = RUNNERS[kind]
    try:
        predicted = runner(case.get("input") or {}, builder)
    except Exception as e:
        logger.warning(f"Error running case {name!r}: {e}")
        detail["error"] = str(e)
        return detail

    detail["predicted"] = predicted
    detail["match"] = bool(compare(expected, predicted))
    return detail


def summarize(details):
    """Accuracy per case kind plus overall."""
    counts = defaultdict(lambda: {"passed": 0, "total": 0})
    for detail in details:
        stats = counts[detail["kind"]]
        stats["total"] += 1
        if detail["match"]:
            stats["passed"] += 1

    summary = {}
    for kind, stats in counts.items():
        accuracy = (stats["passed"] / stats["total"]) if stats["total"] > 0 else 0.0
        summary[kind] = {"accuracy": round(accuracy, 4), **stats}

    total = sum(s["total"] for s in counts.values())
    passed = sum(s["passed"] for s in counts.values())
    overall = {
        "accuracy": round(passed / total, 4) if total > 0 else 0.0,
        "passed": passed,
        "total": total,
    }
    return summary, overall


def main():
    Config.validate()

    ap = argparse.ArgumentParser(description="Run normalizers vs ground_truth.json")
    ap.add_argument("--ground_truth", default=Config.GROUND_TRUTH_PATH, help="Ground truth JSON")
    ap.add_argument("--output", default="test_results.json", help="Output JSON file")
    args = ap.parse_args()

    print(f"\n[INFO] Ground truth: {os.path.abspath(args.ground_truth)}")

    if not os.path.exists(args.ground_truth):
        print("[ERROR] Missing ground truth JSON.")
        return 2

    try:
        with open(args.ground_truth, "r", encoding="utf-8") as f:
            gt_data = json.load(f)
        cases = gt_data["cases"]
    except (OSError, ValueError, KeyError, TypeError) as e:
        print(f"[ERROR] Could not read ground truth: {e}")
        return 3

    print(f"\nFound {len(cases)} cases in ground truth.")

    builder = make_builder()

    details = []
    for i, case in enumerate(cases, 1):
        detail = run_case(case, builder)
        details.append(detail)
        mark = "PASS" if detail["match"] else "FAIL"
        print(f"[{i}] [{mark}] {detail['kind']}: {detail['name']}")
        if not detail["match"]:
            print(f"      expected:  {detail['expected']}")
            print(f"      predicted: {detail.get('predicted')}")
            if detail.get("error"):
                print(f"      error:     {detail['error']}")

    summary, overall = summarize(details)

    print("\n" + "=" * 60)
    print("RESULTS SUMMARY - Normalizer Accuracy")
    print("=" * 60)
    print(f"{'Kind':<20} {'Passed':>10} {'Total':>10} {'Accuracy':>10}")
    print("-" * 60)
    for kind in SUPPORTED_KINDS + tuple(k for k in summary if k not in SUPPORTED_KINDS):
        if kind not in summary:
            continue
        stats = summary[kind]
        print(f"{kind:<20} {stats['passed']:>10} {stats['total']:>10} {stats['accuracy']:>10.1%}")
    print("-" * 60)
    print(f"{'OVERALL':<20} {overall['passed']:>10} {overall['total']:>10} {overall['accuracy']:>10.1%}")
    print("=" * 60)

    # Save results to JSON
    output_data = {"summary": summary, "overall": overall, "details": details}
    with open(args.output, "w", encoding="utf-8") as f:
        json.dump(output_data, f, indent=2, ensure_ascii=False)

    print(f"\n[SUCCESS] Results saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
