import asyncio

from pydantic import BaseModel, Field

from jsonclient import AsyncJsonClient, ClientError, TransportError


class Order(BaseModel):
    sku: str
    quantity: int


class Echo(BaseModel):
    body: Order | None = Field(default=None, alias="json")


async def main():
    client = AsyncJsonClient(Order, Echo)
    client.set_retry_wait_min(0.5)

    try:
        orders = [Order(sku=f"SKU-{i}", quantity=i) for i in range(1, 4)]
        replies = await asyncio.gather(
            *(client.post("https://httpbin.org/anything", order) for order in orders)
        )
        for reply in replies:
            print("Echoed order:", reply.body)

        # 503 is retried until the policy gives up
        await client.get("https://httpbin.org/status/503")

    except TransportError as e:
        print(f"{e}: attempts: {e.attempts}, status: {e.status_code}")
    except ClientError as e:
        print(f"{e}")
    finally:
        await client.close()


asyncio.run(main())
