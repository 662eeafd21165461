"""领域层模型与协议。

包含：
- actions: 封闭的动作枚举 ActionKind。
- models: Message / ActionRequest / OutboundPayload / ChatResult 等数据结构。
- conversation: 按应用划分的会话模型及 ConversationStore 抽象。
- exceptions: 业务异常类型定义。
"""
