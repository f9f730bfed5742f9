from flask import jsonify


class ResponseFormatter:
    @staticmethod
    def success_response(data=None, message="success", status_code=200, **kwargs):
        response = {"success": True, "message": message}

        if data is not None:
            response["data"] = data

        response.update(kwargs)
        return jsonify(response), status_code

    @staticmethod
    def format_parse_response(parsed):
        return ResponseFormatter.success_response(
            data=parsed.to_dict(),
            message="File parsed successfully",
            length=len(parsed.text),
        )

    @staticmethod
    def format_analysis_response(analysis, dashboard, parsed):
        metadata = parsed.metadata.model_dump(by_alias=True, mode="json", exclude_none=True)
        return ResponseFormatter.success_response(
            data={
                "analysis": analysis.to_dict(),
                "dashboard": dashboard.to_dict(),
                "file": {**metadata, "textLength": len(parsed.text)},
            },
            message="Analysis generated successfully",
            status_code=201,
        )

    @staticmethod
    def format_dashboard_response(dashboard):
        return ResponseFormatter.success_response(
            data=dashboard.to_dict(),
            message="Dashboard generated successfully",
        )

    @staticmethod
    def format_chat_response(response_text, conversation_id, timestamp, has_context, fallback=False):
        payload = {
            "response": response_text,
            "conversationId": conversation_id,
            "timestamp": timestamp.isoformat(),
            "analysisContext": has_context,
        }
        message = "Chat response generated successfully"
        if fallback:
            message = "Fallback response provided due to AI service issue"
        return ResponseFormatter.success_response(data=payload, message=message, fallback=fallback)
