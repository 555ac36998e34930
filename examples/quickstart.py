import sys
from pathlib import Path
import os
import json
import time

# Add src to PYTHONPATH for local runs
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from salesforce_rest import (
	HttpError,
	SalesforceConfiguration,
	SalesforceRestClient,
	TransportError,
)


# The token is obtained out of band (e.g. `sf org display --json`); this client never refreshes it.
def current_token() -> str:
	token = os.environ.get("SALESFORCE_ACCESS_TOKEN", "").strip()
	if not token:
		raise SystemExit("Set SALESFORCE_ACCESS_TOKEN before running the quickstart.")
	return token


if not os.environ.get("SALESFORCE_INSTANCE_URL"):
	entered = input("Enter Salesforce instance URL (e.g. https://yourorg.my.salesforce.com): ").strip()
	if not entered:
		print("No URL entered; exiting.")
		sys.exit(1)
	os.environ["SALESFORCE_INSTANCE_URL"] = entered.rstrip('/')

config = SalesforceConfiguration.from_env(current_token)
client = SalesforceRestClient(config)

def log_call(call: str) -> None:
	print({"call": call})

# Retry policy lives with the caller: transport failures are retried, rejections are not.
def backoff_retry(op, *, delays=(0, 2, 5, 10)):
	last_exc = None
	for delay in delays:
		if delay:
			time.sleep(delay)
		try:
			return op()
		except TransportError as ex:
			print(f'Transport failure, retrying: {ex} ({ex.subcode})')
			last_exc = ex
		except HttpError as ex:
			print(f'Request rejected: {ex.status_code} {ex.body}')
			raise
	if last_exc:
		raise last_exc

def read_json(stream):
	with stream:
		return json.load(stream)

print("Describe Account:")
log_call("client.describe_sobject('Account')")
describe = backoff_retry(lambda: read_json(client.describe_sobject("Account")))
print({"name": describe.get("name"), "fields": len(describe.get("fields", []))})

print("Query accounts (paged):")
log_call("client.query(...)")
page = backoff_retry(lambda: read_json(client.query("SELECT Id, Name FROM Account ORDER BY Name")))
total = 0
while True:
	total += len(page.get("records", []))
	print({"page_records": len(page.get("records", [])), "so_far": total, "done": page.get("done")})
	next_url = page.get("nextRecordsUrl")
	if page.get("done") or not next_url:
		break
	log_call(f"client.get_next_records({next_url!r})")
	page = backoff_retry(lambda: read_json(client.get_next_records(next_url)))

create_choice = input("Create a sample Account tree? (y/N): ").strip() or "n"
if create_choice.lower() in ("y", "yes", "true", "1"):
	tree = {
		"records": [
			{
				"attributes": {"type": "Account", "referenceId": "ref1"},
				"name": "Quickstart Account",
				"Contacts": {
					"records": [
						{"attributes": {"type": "Contact", "referenceId": "ref2"}, "lastname": "Quickstart"},
					]
				},
			}
		]
	}
	log_call("client.post_record('Account', ...)")
	backoff_retry(lambda: client.post_record("Account", json.dumps(tree)))
	print({"created": True})

client.close()
