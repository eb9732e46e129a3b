from pydantic import BaseModel, Field

from jsonclient import JsonClient, ClientError, DecodeError, TransportError


class Greeting(BaseModel):
    name: str
    language: str = "en"


class Echo(BaseModel):
    url: str
    headers: dict[str, str]
    body: Greeting | None = Field(default=None, alias="json")


def main():
    with JsonClient(Greeting, Echo) as client:
        client.add_header("X-Request-Source", "jsonclient-example")
        client.set_retries(2)
        client.set_timeout(5)

        try:
            echo = client.post("https://httpbin.org/anything", Greeting(name="Ada"))
            print("Echoed body:", echo.body)
            print("Echoed headers:", echo.headers)

            echo = client.get("https://httpbin.org/anything?page=2")
            print("GET url:", echo.url)

        except TransportError as e:
            print(f"{e}: status: {e.status_code}, body: {e.body}")
        except DecodeError as e:
            print("Invalid response:", e)
        except ClientError as e:
            print(f"{e}")


if __name__ == "__main__":
    main()
