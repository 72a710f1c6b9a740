import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "sdk", "python"))

from lookit_client import LookitClient  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Submit a fitting to a running LookIT API and wait for the result")
    parser.add_argument("--clothes", default="sample_data/clothes.png", help="Path to clothes image")
    parser.add_argument("--body", default="sample_data/body.png", help="Path to body image")
    parser.add_argument("--base-url", default="http://127.0.0.1:8000")
    parser.add_argument("--user-id", type=int, default=1)
    parser.add_argument("--timeout", type=int, default=120)
    args = parser.parse_args()

    client = LookitClient(args.base_url, user_id=args.user_id, api_key=os.environ.get("API_KEY"))
    before = len(client.list_results())
    task_id = client.request_fitting(args.clothes, args.body)
    print(f"Submitted task {task_id}")

    results = client.wait_for_results(before + 1, timeout_s=args.timeout)
    if len(results) <= before:
        print("No new result; check the API logs for the task id above.")
        sys.exit(1)
    print(f"Result: {results[-1]['result_image_url']}")


if __name__ == "__main__":
    main()
