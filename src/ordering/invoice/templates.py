"""Invoice email template."""

from html import escape


class InvoiceEmailTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        store = context["store_name"]
        code = context["invoice_code"]
        return {
            "subject": f"Invoice {code} - {store}",
            "body": _text(context),
            "html_body": _html(context),
        }


def _text(ctx: dict) -> str:
    lines = [
        ctx["store_name"],
        f"Invoice {ctx['invoice_code']}",
        f"Tanggal Pemesanan: {ctx['order_date']}",
        "",
        f"Pemesan: {ctx['customer_name']}",
        f"Tanggal Pengiriman: {ctx['delivery_date']}",
        f"Penerima: {ctx['recipient_name']} ({ctx['recipient_phone']})",
        f"Alamat: {ctx['address']}",
        "",
        "Detail Pesanan:",
    ]
    for item in ctx["items"]:
        lines.append(
            f"- {item['name']} ({item['size']}) x{item['quantity']} "
            f"@ {item['unit_price_display']} = {item['line_total_display']}"
        )
    lines += [
        "",
        f"Sub Total Barang: {ctx['subtotal_display']}",
        f"Total Ongkos Kirim: {ctx['shipping_cost_display']}",
        f"Total Belanja: {ctx['grand_total_display']}",
        "",
        f"Metode Pembayaran: {ctx['payment_method']}",
        f"Catatan Order: {ctx['note']}",
        f"Status Pembayaran: {ctx['payment_status']}",
    ]
    return "\n".join(lines)


def _html(ctx: dict) -> str:
    e = {key: escape(str(value)) for key, value in ctx.items() if key != "items"}
    rows = "".join(
        "<tr>"
        f"<td>{escape(item['name'])} ({escape(item['size'])})</td>"
        f'<td align="center">{item["quantity"]}</td>'
        f'<td align="right">{item["unit_price_display"]}</td>'
        f'<td align="right">{item["line_total_display"]}</td>'
        "</tr>"
        for item in ctx["items"]
    )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: auto; padding: 20px;">'
        f"<h2>{e['store_name']}</h2>"
        f"<h3>Invoice {e['invoice_code']}</h3>"
        f"<p>Tanggal Pemesanan: {e['order_date']}</p>"
        "<table width=\"100%\"><tr>"
        f"<td valign=\"top\"><strong>Informasi Pemesan:</strong><br/>Pemesan: {e['customer_name']}<br/>"
        f"Tanggal Pengiriman: {e['delivery_date']}</td>"
        f"<td valign=\"top\"><strong>Informasi Penerima:</strong><br/>Penerima: {e['recipient_name']}<br/>"
        f"Telp: {e['recipient_phone']}<br/>Alamat: {e['address']}</td>"
        "</tr></table>"
        "<h4>Detail Pesanan:</h4>"
        '<table width="100%" border="1" cellpadding="8" cellspacing="0">'
        "<thead><tr><th align=\"left\">Informasi Produk</th><th>Jumlah</th>"
        "<th align=\"right\">Harga Satuan</th><th align=\"right\">Total Harga</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
        f"<p>Sub Total Barang: {e['subtotal_display']}<br/>"
        f"Total Ongkos Kirim: {e['shipping_cost_display']}<br/>"
        f"<strong>Total Belanja: {e['grand_total_display']}</strong></p>"
        f"<p><strong>Metode Pembayaran:</strong> {e['payment_method']}</p>"
        f"<p><strong>Catatan Order:</strong> {e['note']}</p>"
        f"<p><strong>Status Pembayaran:</strong> {e['payment_status']}</p>"
        f"<p style=\"font-size: 12px; color: #888;\">Silakan hubungi {e['store_name']} apabila kamu membutuhkan bantuan.</p>"
        "</div>"
    )
