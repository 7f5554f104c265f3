import asyncio

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

from nordnet.core.client.nordnet_client import NordnetClient

if __name__ == "__main__":

    async def main():
        tracer_provider = TracerProvider()
        otlp_exporter = OTLPSpanExporter(endpoint="localhost:4317", insecure=True)
        span_processor = BatchSpanProcessor(otlp_exporter, max_export_batch_size=20)
        tracer_provider.add_span_processor(span_processor)
        trace.set_tracer_provider(tracer_provider)
        tracer = trace.get_tracer("nordnet")
        try:
            # NORDNET_CREDENTIALS and NORDNET_SERVICE must be set
            async with await NordnetClient.create(tracer=tracer) as client:
                status = await client.system_status()
                print(f"system running: {status.system_running}")
                await client.login()
                for summary in await client.accounts():
                    account = await client.account(summary.id)
                    print(f"{summary.id}: {account.trading_power} {account.account_currency}")
                    for position in await client.account_positions(summary.id):
                        print(f"  {position.instrument.identifier} x {position.qty}")
                await client.logout()
        except Exception as e:
            print(e)
        finally:
            tracer_provider.shutdown()

    asyncio.run(main())
