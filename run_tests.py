#!/usr/bin/env python3
"""
Chatbot Studio smoke test runner.
Builds a throwaway bot on a running server, chats with it and checks the
replies against the expected intent, FAQ or fallback answers.
Measures reply latency.
"""

import json
import os
import sys
import time
import uuid
import requests
from datetime import datetime

# Configuration
BASE_URL = os.environ.get("STUDIO_URL", "http://localhost:8000")
EMAIL = os.environ.get("STUDIO_EMAIL", "smoke@example.com")
PASSWORD = os.environ.get("STUDIO_PASSWORD", "smoke-test-password")
RESULTS_PATH = os.environ.get("STUDIO_RESULTS", "smoke_results.json")

WELCOME = "Hi! I am the smoke test bot."

INTENTS = [
    {"name": "greeting", "patterns": ["hello", "good morning"], "response": "Hello there!"},
    {"name": "refund", "patterns": ["refund", "money back"], "response": "Refunds take 5 days."},
]

FAQS = [
    {"question": "opening hours", "answer": "We are open 9 to 5."},
    {"question": "shipping", "answer": "Shipping is free over $50."},
]

TEST_CASES = [
    {"id": 1, "kind": "intent", "message": "HELLO!", "expected": "Hello there!"},
    {"id": 2, "kind": "intent", "message": "Can I get my money back?", "expected": "Refunds take 5 days."},
    {"id": 3, "kind": "faq", "message": "What are your opening hours?", "expected": "We are open 9 to 5."},
    {"id": 4, "kind": "faq", "message": "hello, how much is shipping", "expected": "Shipping is free over $50."},
    {"id": 5, "kind": "fallback", "message": "Tell me a joke", "expected": WELCOME},
]


def get_token():
    """Log in, registering the smoke account on first use."""
    response = requests.post(
        f"{BASE_URL}/api/v1/auth/login",
        json={"email": EMAIL, "password": PASSWORD}
    )
    if response.status_code == 401:
        response = requests.post(
            f"{BASE_URL}/api/v1/auth/register",
            json={"email": EMAIL, "password": PASSWORD, "name": "Smoke Test"}
        )
    response.raise_for_status()
    return response.json()["tokens"]["accessToken"]


def create_bot(headers: dict) -> str:
    """Create and publish a bot with the fixture intents and FAQs."""
    response = requests.post(
        f"{BASE_URL}/api/v1/bots",
        json={"name": f"Smoke {datetime.now():%H:%M:%S}", "welcomeMessage": WELCOME},
        headers=headers
    )
    response.raise_for_status()
    bot_id = response.json()["id"]

    for intent in INTENTS:
        requests.post(
            f"{BASE_URL}/api/v1/bots/{bot_id}/intents", json=intent, headers=headers
        ).raise_for_status()
    for faq in FAQS:
        requests.post(
            f"{BASE_URL}/api/v1/bots/{bot_id}/faqs", json=faq, headers=headers
        ).raise_for_status()

    requests.post(f"{BASE_URL}/api/v1/bots/{bot_id}/publish", headers=headers).raise_for_status()
    return bot_id


def send_message(bot_id: str, session_id: str, message: str):
    """Send a widget message and time the reply."""
    start_time = time.time()

    response = requests.post(
        f"{BASE_URL}/api/v1/chat",
        json={
            "botId": bot_id,
            "sessionId": session_id,
            "message": message,
            "metadata": {"source": "smoke"},
        },
        timeout=30
    )

    latency = time.time() - start_time

    if response.status_code != 200:
        return None, latency, f"Error: {response.status_code} {response.text}"

    data = response.json()
    return data["message"], latency, data["conversationId"]


def run_tests():
    """Run all test cases and collect results."""
    headers = {"Authorization": f"Bearer {get_token()}"}
    bot_id = create_bot(headers)
    session_id = f"smoke-{uuid.uuid4()}"
    results = []
    conversation_ids = set()

    print("=" * 80)
    print("Chatbot Studio Smoke Test Run")
    print(f"Started at: {datetime.now().isoformat()}")
    print(f"Bot: {bot_id}")
    print("=" * 80)

    for test_case in TEST_CASES:
        print(f"\n[Test {test_case['id']}/{len(TEST_CASES)}] {test_case['kind']}")
        print(f"Message: {test_case['message']}")

        reply, latency, detail = send_message(bot_id, session_id, test_case["message"])
        passed = reply == test_case["expected"]
        if reply is not None:
            conversation_ids.add(detail)

        print(f"Reply ({latency * 1000:.0f}ms): {reply if reply is not None else detail}")
        print("PASS" if passed else f"FAIL (expected: {test_case['expected']})")

        results.append({
            **test_case,
            "reply": reply,
            "latency": latency,
            "passed": passed,
        })

    # One session must map to one conversation
    session_ok = len(conversation_ids) == 1

    # The transcript holds a user and an assistant message per test
    conversation = requests.get(
        f"{BASE_URL}/api/v1/conversations/{next(iter(conversation_ids))}",
        headers=headers
    ).json() if conversation_ids else {"messages": []}
    transcript_ok = len(conversation["messages"]) == 2 * len(TEST_CASES)

    # Summary
    print("\n" + "=" * 80)
    print("TEST SUMMARY")
    print("=" * 80)

    passed = [r for r in results if r["passed"]]
    print(f"Total Tests: {len(results)}")
    print(f"Passed: {len(passed)}")
    print(f"Failed: {len(results) - len(passed)}")
    print(f"Single conversation per session: {session_ok}")
    print(f"Transcript complete: {transcript_ok}")

    latencies = [r["latency"] for r in results]
    print("\nLatency Statistics:")
    print(f"  Average: {sum(latencies) / len(latencies) * 1000:.0f}ms")
    print(f"  Max: {max(latencies) * 1000:.0f}ms")

    requests.delete(f"{BASE_URL}/api/v1/bots/{bot_id}", headers=headers)

    with open(RESULTS_PATH, "w") as f:
        json.dump({
            "timestamp": datetime.now().isoformat(),
            "summary": {
                "total": len(results),
                "passed": len(passed),
                "session_ok": session_ok,
                "transcript_ok": transcript_ok,
            },
            "results": results
        }, f, ensure_ascii=False, indent=2)

    print(f"\nResults saved to: {RESULTS_PATH}")
    print("=" * 80)

    return len(passed) == len(results) and session_ok and transcript_ok


if __name__ == "__main__":
    sys.exit(0 if run_tests() else 1)
