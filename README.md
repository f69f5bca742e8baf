# sakuracloud_exporter

Metric collectors for SAKURA Cloud resources, shaped after the Prometheus
collector model. Each collector asks a client object for resources and
monitoring values. It turns them into `Metric` objects, and each one carries a
`Desc`, label values (also available as the `labels` dict), a gauge value and
an optional timestamp.

## Collectors

| Module | Collector | Client it needs |
| --- | --- | --- |
| `sakuracloud_exporter.exporter` | `ExporterCollector` | none |
| `sakuracloud_exporter.bill` | `BillCollector` | `BillClient` |
| `sakuracloud_exporter.coupon` | `CouponCollector` | `CouponClient` |
| `sakuracloud_exporter.esme` | `ESMECollector` | `ESMEClient` |
| `sakuracloud_exporter.auto_backup` | `AutoBackupCollector` | `AutoBackupClient` |
| `sakuracloud_exporter.internet` | `InternetCollector` | `InternetClient` |
| `sakuracloud_exporter.local_router` | `LocalRouterCollector` | `LocalRouterClient` |

The clients are `typing.Protocol` classes. Any object with the matching
methods will do, such as `read()` for bills or `find()` and `logs(esme_id)`
for ESME.

Every collector has two methods:

- `describe()` yields the descriptors of the metrics the collector produces.
  `ExporterCollector.describe()` yields only the start-time descriptor.
- `collect()` yields the metrics for the current state of the resources.
  Per-resource API calls, such as monitoring values, logs, archives and peer
  health, run in a thread pool. Their metrics follow the info metrics, in no
  fixed order.

A failed API call does not stop a collection. The collector logs a warning
of the form `<message> err=<error>` and adds one to its `ErrorCounter` under
its own name, such as `"bill"`, `"coupon"` or `"local_router"`. It then goes on
with the rest. When a collector is built, it also registers its name in the
counter with the value 0.

The collectors that depend on the current time (`CouponCollector`,
`InternetCollector`, `LocalRouterCollector`) take an optional `clock`
callable that returns an aware `datetime`.

## Example

```python
import logging

from sakuracloud_exporter.bill import Bill, BillCollector
from sakuracloud_exporter.core import ErrorCounter


class StaticBillClient:
    def read(self):
        return Bill(id=1, amount=1234, member_id="member")


errors = ErrorCounter()
collector = BillCollector(StaticBillClient(), logging.getLogger("exporter"), errors)

for metric in collector.collect():
    print(metric.desc.name, metric.labels, metric.value)

print(errors.value("bill"))  # 0.0
```

## Helpers

`sakuracloud_exporter.core` also provides:

- `Desc`, `Metric`, `ErrorCounter` and the `Collector` base class.
- The `DayOfWeek`, `Availability` and `InstanceStatus` enums, plus the
  `FeedItem` and `MonitorInterfaceValue` records.
- `flatten_string_slice`, which turns a list of tags into a sorted,
  comma-wrapped string such as `",tag1,tag2,"`. An empty list gives `""`.
- `flatten_backup_span_weekdays`, which does the same for `DayOfWeek` values.
  These are ordered from Sunday to Saturday, for example `",sun,mon,tue,"`.

## What this package does not do

The package only builds metric objects. It has:

- no command-line program;
- no HTTP endpoint that serves metrics in the Prometheus text format;
- no client that talks to the SAKURA Cloud API.

You supply the client objects. You then pass the collected metrics to
whatever serves or stores them.

## Tests

```
pip install -e .[test]
pytest
```