"""Basic Locust file for load testing the query gateway.

To run:
1. Install the dev extra (`pip install -e ".[dev]"`).
2. Run locust -f performance_tests/locustfile.py
3. Open your browser to http://localhost:8089 (or the port specified by Locust).
4. Configure the number of users, spawn rate, and host (e.g., http://localhost:8000).
5. Start Swarming.
"""

import random
import string

from locust import HttpUser, between, events, task


@events.init_command_line_parser.add_listener
def _(parser):
    parser.add_argument(
        "--max-message-length",
        type=int,
        env_var="LOCUST_MAX_MESSAGE_LENGTH",
        default=10000,
        help="Upper bound for generated echo message lengths",
    )


class GatewayUser(HttpUser):
    wait_time = between(1, 3)  # seconds
    graphql_endpoint = "/graphql"

    def _random_message(self) -> str:
        length = random.randint(0, self.environment.parsed_options.max_message_length)
        return "".join(random.choices(string.printable, k=length))

    @task(5)
    def echo(self):
        echo_query = """
            query Echo($msg: String!) {
                echo(message: $msg) { original reversed length timestamp }
            }
        """
        message = self._random_message()
        with self.client.post(
            self.graphql_endpoint,
            json={"query": echo_query, "variables": {"msg": message}},
            catch_response=True,
            name="GraphQL: Echo",
        ) as response:
            if response.status_code != 200:
                response.failure(f"Echo failed with status {response.status_code}")
                return
            data = response.json()
            if data.get("errors"):
                response.failure(f"GraphQL error in echo: {data['errors']}")
            elif data["data"]["echo"]["length"] != len(message):
                response.failure("Echo returned a wrong length")
            else:
                response.success()

    @task(3)
    def ping(self):
        with self.client.post(
            self.graphql_endpoint,
            json={"query": "{ ping { status latency } }"},
            catch_response=True,
            name="GraphQL: Ping",
        ) as response:
            if response.status_code == 200 and response.json().get("data", {}).get("ping"):
                response.success()
            else:
                response.failure(
                    f"Ping failed with status {response.status_code}: {response.text}"
                )

    @task(1)
    def aliased_batch(self):
        # Several aliased operations in one document
        query = " ".join(
            f'e{i}: echo(message: "batch {i}") {{ original }}' for i in range(5)
        )
        self.client.post(
            self.graphql_endpoint,
            json={"query": f"query {{ {query} ping {{ status }} }}"},
            name="GraphQL: Aliased Batch",
        )
